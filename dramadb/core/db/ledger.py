"""
Migration ledger: the `_prisma_migrations` history table.

The table layout matches what Prisma writes, so a store created by either tool
can be managed by the other.

Design:
- Every write uses bound parameters; names and checksums never end up in SQL text.
- Checksums are stored but not compared against the scripts on later runs.
- Entries are never deleted. A migration counts as applied only once
  `finished_at` is set.
"""

from __future__ import annotations

import secrets
import time

import aiosqlite

from dramadb.core.log import get_logger
from dramadb.core.db.models import LedgerEntry
from dramadb.core.store import Store

logger = get_logger(__name__)

LEDGER_TABLE = "_prisma_migrations"

CREATE_LEDGER_SQL = f"""
CREATE TABLE "{LEDGER_TABLE}" (
    "id" TEXT PRIMARY KEY NOT NULL,
    "checksum" TEXT NOT NULL,
    "finished_at" DATETIME,
    "migration_name" TEXT NOT NULL,
    "logs" TEXT,
    "rolled_back_at" DATETIME,
    "started_at" DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "applied_steps_count" INTEGER NOT NULL DEFAULT 0
)
"""


def generate_entry_id() -> str:
    """Millisecond clock plus random suffix, e.g. `1769500000000-9f2c41ab`."""
    return f"{time.time_ns() // 1_000_000}-{secrets.token_hex(4)}"


class Ledger:
    def __init__(self, store: Store) -> None:
        self._store = store

    async def exists(self) -> bool:
        row = await self._store.fetch_one(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?;",
            (LEDGER_TABLE,),
        )
        return row is not None

    async def ensure_table_exists(self) -> bool:
        """
        Create the ledger table if it is missing.

        Returns True when the table was created by this call.
        """
        if await self.exists():
            return False
        logger.info("Creating %s table...", LEDGER_TABLE)
        await self._store.execute(CREATE_LEDGER_SQL)
        await self._store.commit()
        logger.info("%s table created", LEDGER_TABLE)
        return True

    async def applied_names(self) -> list[str]:
        """
        Names of finished migrations, oldest first.

        A failed read is logged and reported as "nothing applied". Callers
        cannot tell an unreadable ledger from an empty one.
        """
        try:
            rows = await self._store.fetch_all(
                f"""
                SELECT migration_name FROM "{LEDGER_TABLE}"
                WHERE finished_at IS NOT NULL
                ORDER BY started_at ASC;
                """
            )
        except aiosqlite.Error as e:
            logger.error("Failed to get applied migrations: %s", e)
            return []
        return [str(r["migration_name"]) for r in rows]

    async def entries(self) -> list[LedgerEntry]:
        rows = await self._store.fetch_all(
            f"""
            SELECT id, checksum, migration_name, started_at, finished_at,
                   applied_steps_count, logs, rolled_back_at
            FROM "{LEDGER_TABLE}"
            ORDER BY started_at ASC, migration_name ASC;
            """
        )
        return [
            LedgerEntry(
                id=r["id"],
                checksum=r["checksum"],
                migration_name=r["migration_name"],
                started_at=r["started_at"],
                finished_at=r["finished_at"],
                applied_steps_count=int(r["applied_steps_count"]),
                logs=r["logs"],
                rolled_back_at=r["rolled_back_at"],
            )
            for r in rows
        ]

    async def begin_entry(self, name: str, checksum: str) -> str:
        """
        Record the start of a migration and return the entry id.

        An unfinished entry left behind by an earlier failed attempt is
        restarted in place, keeping `migration_name` unique.
        """
        row = await self._store.fetch_one(
            f"""
            SELECT id FROM "{LEDGER_TABLE}"
            WHERE migration_name = ? AND finished_at IS NULL
            ORDER BY started_at DESC
            LIMIT 1;
            """,
            (name,),
        )
        if row is not None:
            entry_id = str(row["id"])
            await self._store.execute(
                f"""
                UPDATE "{LEDGER_TABLE}"
                SET checksum = ?, started_at = datetime('now'),
                    applied_steps_count = 0, logs = NULL
                WHERE id = ?;
                """,
                (checksum, entry_id),
            )
            logger.debug("Restarting unfinished ledger entry %s for %s", entry_id, name)
        else:
            entry_id = generate_entry_id()
            await self._store.execute(
                f"""
                INSERT INTO "{LEDGER_TABLE}"
                    (id, checksum, migration_name, started_at, applied_steps_count)
                VALUES (?, ?, ?, datetime('now'), 0);
                """,
                (entry_id, checksum, name),
            )
        await self._store.commit()
        return entry_id

    async def complete_entry(self, entry_id: str, steps_applied: int) -> None:
        await self._store.execute(
            f"""
            UPDATE "{LEDGER_TABLE}"
            SET finished_at = datetime('now'), applied_steps_count = ?
            WHERE id = ?;
            """,
            (int(steps_applied), entry_id),
        )
        await self._store.commit()

    async def fail_entry(self, entry_id: str, steps_applied: int, logs: str) -> None:
        """Keep the entry unfinished but record progress and the error text."""
        await self._store.execute(
            f"""
            UPDATE "{LEDGER_TABLE}"
            SET applied_steps_count = ?, logs = ?
            WHERE id = ?;
            """,
            (int(steps_applied), logs, entry_id),
        )
        await self._store.commit()

    async def record_applied(self, name: str, checksum: str, steps_applied: int) -> str:
        """Write an already-finished entry (used to baseline a fresh store)."""
        entry_id = generate_entry_id()
        await self._store.execute(
            f"""
            INSERT INTO "{LEDGER_TABLE}"
                (id, checksum, migration_name, started_at, finished_at, applied_steps_count)
            VALUES (?, ?, ?, datetime('now'), datetime('now'), ?);
            """,
            (entry_id, checksum, name, int(steps_applied)),
        )
        await self._store.commit()
        return entry_id
