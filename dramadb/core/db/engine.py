"""
Schema bootstrap state machine.

    UNPROBED -> FRESH_BOOTSTRAP | INCREMENTAL_APPLY -> SEEDED -> READY

Failure policy is asymmetric:
- FRESH_BOOTSTRAP must succeed completely. Any error aborts startup and may
  leave a partially created store behind.
- INCREMENTAL_APPLY and seeding are best effort. Their errors are reported in a
  `PhaseResult`, logged, and startup continues with whatever schema exists.

Statements run one at a time and each one is committed on its own; there is no
transaction around a whole migration. A failure halfway through a script leaves
the earlier statements applied and the ledger entry unfinished.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import aiosqlite

from dramadb.core import (
    LedgerError,
    MigrationReadError,
    StatementExecutionError,
)
from dramadb.core.db.ledger import Ledger
from dramadb.core.log import get_logger
from dramadb.core.db.models import EngineState, InitReport, MigrationScript, PhaseResult
from dramadb.core.db.probe import SchemaProbe
from dramadb.core.db.seeder import DefaultDataSeeder
from dramadb.core.db.source import MigrationSource
from dramadb.core.db.splitter import split_statements
from dramadb.core.store import Store

logger = get_logger(__name__)

PHASE = "migrations"


def compute_pending(catalog: Sequence[str], applied: Iterable[str]) -> list[str]:
    """Catalog entries not yet applied, in catalog order."""
    done = set(applied)
    return [name for name in catalog if name not in done]


class MigrationEngine:
    """
    Brings a store to the current schema and seeds baseline rows.

    All collaborators share the same `Store`; pass explicit instances to
    substitute any of them in tests.
    """

    def __init__(
        self,
        store: Store,
        *,
        source: MigrationSource,
        ledger: Ledger | None = None,
        probe: SchemaProbe | None = None,
        seeder: DefaultDataSeeder | None = None,
        record_baseline: bool = False,
    ) -> None:
        self._store = store
        self._source = source
        self._ledger = ledger or Ledger(store)
        self._probe = probe or SchemaProbe(store)
        self._seeder = seeder or DefaultDataSeeder(store)
        self._record_baseline = record_baseline
        self._state = EngineState.UNPROBED

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    async def initialize(self) -> InitReport:
        """
        Run the full startup sequence.

        Raises on fatal problems only: connectivity, probe errors other than a
        missing table, and any failure of the fresh bootstrap.
        """
        self._state = EngineState.UNPROBED
        report = InitReport()

        probe = await self._probe.probe()
        report.fresh = probe.fresh

        if probe.fresh:
            self._state = EngineState.FRESH_BOOTSTRAP
            report.bootstrap_migration = await self.fresh_bootstrap()
        else:
            self._state = EngineState.INCREMENTAL_APPLY
            report.migrations = await self.incremental_apply()
            if not report.migrations.ok:
                # Best effort: the app still starts on the schema it has.
                logger.error(
                    "Failed to check/apply pending migrations: %s", report.migrations.error
                )

        self._state = EngineState.SEEDED
        report.seeding = await self._seeder.run()
        report.seed_summary = self._seeder.last_summary

        self._state = EngineState.READY
        report.state = self._state
        logger.info("Database initialization completed!")
        return report

    async def fresh_bootstrap(self) -> str:
        """
        Build a brand new store from the latest (cumulative) migration.

        No ledger row is written for that script unless baselining is enabled.
        Returns the name of the migration used.
        """
        logger.info("Creating database schema...")
        name = self._source.latest()
        script = self._source.read_script(name)
        logger.info("Reading migration file: %s", script.path)

        statements = split_statements(script.sql)
        logger.info("Executing %d SQL statements...", len(statements))
        for index, statement in enumerate(statements, start=1):
            logger.debug("Executing statement %d/%d", index, len(statements))
            try:
                await self._store.execute(statement)
                await self._store.commit()
            except aiosqlite.Error as e:
                logger.error("Failed to create database schema: %s", e)
                raise StatementExecutionError(name, index, statement, str(e)) from e

        logger.info("Database schema created successfully")
        await self._store.reconnect()

        try:
            await self._ledger.ensure_table_exists()
            if self._record_baseline:
                await self._baseline(up_to=name)
        except aiosqlite.Error as e:
            raise LedgerError(f"Cannot prepare migration ledger: {e}") from e
        return name

    async def _baseline(self, *, up_to: str) -> None:
        for name in self._source.list_all():
            if name > up_to:
                break
            try:
                script = self._source.read_script(name)
            except MigrationReadError as e:
                logger.warning("Not baselining %s: %s", name, e)
                continue
            steps = len(split_statements(script.sql))
            await self._ledger.record_applied(name, script.checksum, steps)
            logger.info("Baselined migration %s", name)

    async def pending(self) -> list[str]:
        """Catalog migrations missing from the ledger. Empty if there is no catalog."""
        if not self._source.exists():
            return []
        catalog = self._source.list_all()
        if not await self._ledger.exists():
            return catalog
        return compute_pending(catalog, await self._ledger.applied_names())

    async def incremental_apply(self) -> PhaseResult:
        """
        Apply every pending migration in catalog order.

        A missing script is skipped with a warning. The first migration whose
        statements fail stops the loop; later migrations stay pending.
        """
        result = PhaseResult(phase=PHASE)
        logger.info("Checking for pending migrations...")

        try:
            await self._ledger.ensure_table_exists()
        except aiosqlite.Error as e:
            result.error = LedgerError(f"Cannot create migration ledger: {e}")
            return result

        if not self._source.exists():
            logger.info("No migrations directory found")
            return result

        catalog = self._source.list_all()
        if not catalog:
            logger.info("No migration folders found")
            return result

        applied = await self._ledger.applied_names()
        logger.info("Applied migrations: %d", len(applied))

        pending = compute_pending(catalog, applied)
        if not pending:
            logger.info("No pending migrations")
            return result

        logger.info("Found %d pending migrations: %s", len(pending), ", ".join(pending))
        for name in pending:
            try:
                await self.apply_migration(name)
            except MigrationReadError as e:
                logger.warning("Skipping migration %s: %s", name, e)
                result.skipped.append(name)
                continue
            except StatementExecutionError as e:
                logger.error("Failed to apply migration %s: %s", name, e)
                result.error = e
                break
            except aiosqlite.Error as e:
                logger.error("Failed to record migration %s: %s", name, e)
                result.error = LedgerError(f"Cannot record migration {name}: {e}")
                break
            result.applied.append(name)

        if result.ok:
            logger.info("All pending migrations applied successfully")
        return result

    async def apply_migration(self, name: str) -> int:
        """
        Apply one migration and record it in the ledger.

        Returns the number of statements executed. On a failing statement the
        ledger entry keeps `finished_at` NULL with the count of statements
        that did succeed, and `StatementExecutionError` is raised.
        """
        logger.info("Applying migration: %s", name)
        script: MigrationScript = self._source.read_script(name)
        statements = split_statements(script.sql)

        entry_id = await self._ledger.begin_entry(name, script.checksum)

        applied_steps = 0
        for index, statement in enumerate(statements, start=1):
            try:
                await self._store.execute(statement)
                await self._store.commit()
            except aiosqlite.Error as e:
                await self._store.rollback()
                await self._ledger.fail_entry(entry_id, applied_steps, str(e))
                raise StatementExecutionError(name, index, statement, str(e)) from e
            applied_steps += 1

        await self._ledger.complete_entry(entry_id, applied_steps)
        logger.info("Migration %s applied successfully (%d steps)", name, applied_steps)
        return applied_steps
