"""
Process-start entry points.

`initialize_database()` must complete before the application accepts any
requests; it owns the store exclusively while it runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import aiosqlite

from dramadb.config import DbConfig, get_db_config
from dramadb.core import CoreError
from dramadb.core.db.engine import MigrationEngine
from dramadb.core.db.ledger import Ledger
from dramadb.core.log import get_logger
from dramadb.core.db.models import InitReport, LedgerEntry, PhaseResult
from dramadb.core.db.probe import SchemaProbe
from dramadb.core.db.seeder import DefaultDataSeeder
from dramadb.core.db.source import MigrationSource
from dramadb.core.store import Store, database_path_from_url, ensure_database_dir

logger = get_logger(__name__)


@dataclass
class StatusReport:
    fresh: bool
    entries: list[LedgerEntry] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)


def build_engine(store: Store, config: DbConfig) -> MigrationEngine:
    return MigrationEngine(
        store,
        source=MigrationSource(config.migrations_dir),
        probe=SchemaProbe(store, config.probe_table),
        record_baseline=config.record_baseline,
    )


async def open_store(config: DbConfig) -> Store:
    """Resolve the database path, create its directory and connect."""
    logger.info("Database URL: %s", config.database_url)
    db_path = database_path_from_url(config.database_url)
    ensure_database_dir(db_path)

    store = Store(db_path)
    await store.open()
    logger.info("Database connected successfully")
    return store


async def initialize_database(
    config: DbConfig | None = None,
    *,
    store: Store | None = None,
) -> InitReport:
    """
    Bring the store to the current schema and seed default data.

    When `store` is given it is used as-is and left open for the caller;
    otherwise a store is opened from `config` and closed afterwards.
    """
    config = config or get_db_config()
    owns_store = store is None
    if store is None:
        store = await open_store(config)

    try:
        return await build_engine(store, config).initialize()
    except (CoreError, aiosqlite.Error) as e:
        logger.error("Database initialization failed: %s", e)
        raise
    finally:
        if owns_store:
            await store.close()


async def seed_database(config: DbConfig | None = None) -> PhaseResult:
    """Run only the default data seeding against an initialized store."""
    config = config or get_db_config()
    store = await open_store(config)
    try:
        return await DefaultDataSeeder(store).run()
    finally:
        await store.close()


async def database_status(config: DbConfig | None = None) -> StatusReport:
    """Report whether the store is fresh, what the ledger holds and what is pending."""
    config = config or get_db_config()
    store = await open_store(config)
    try:
        probe = await SchemaProbe(store, config.probe_table).probe()
        if probe.fresh:
            # A fresh store is built from the latest script alone.
            source = MigrationSource(config.migrations_dir)
            catalog = source.list_all() if source.exists() else []
            return StatusReport(fresh=True, pending=catalog[-1:])

        ledger = Ledger(store)
        entries = await ledger.entries() if await ledger.exists() else []
        pending = await build_engine(store, config).pending()
        return StatusReport(fresh=False, entries=entries, pending=pending)
    finally:
        await store.close()
