"""
Store handle for the application SQLite database.

The handle is created once per process start and passed explicitly into every
component that needs the database (probe, ledger, engine, seeder). There is no
module-level connection: tests get their own in-memory or temporary store.

Usage:
    store = Store("data/dev.db")
    await store.open()
    rows = await store.fetch_all("SELECT ...")
    await store.close()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import aiosqlite

from dramadb.core import ConnectivityError
from dramadb.core.log import get_logger

logger = get_logger(__name__)

MEMORY_PATH = ":memory:"

Params = Sequence[Any] | Mapping[str, Any]


def database_path_from_url(url: str) -> str:
    """
    Derive a filesystem path from a connection string.

    `file:./dev.db` -> `./dev.db`. Plain paths and `:memory:` pass through.
    """
    url = url.strip()
    if url.startswith("file:"):
        url = url[len("file:") :]
    if not url:
        raise ValueError("Database URL does not name a file")
    return url


def ensure_database_dir(db_path: str | Path) -> Path | None:
    """
    Create the directory holding the database file if it is missing.

    Returns the directory when it had to be created, otherwise None.
    """
    if str(db_path) == MEMORY_PATH:
        return None
    db_dir = Path(db_path).parent
    if db_dir.exists():
        return None
    db_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Created database directory: %s", db_dir)
    return db_dir


class Store:
    """
    Thin async wrapper around a single aiosqlite connection.

    Notes:
    - Statements are not committed implicitly; callers decide when to commit.
    - `reconnect()` is used after a fresh bootstrap to drop any
      connection-level schema cache.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = str(db_path)
        self._conn: aiosqlite.Connection | None = None

    @property
    def path(self) -> str:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def in_memory(self) -> bool:
        return self._db_path == MEMORY_PATH

    async def open(self) -> None:
        if self._conn is not None:
            return
        try:
            conn = await aiosqlite.connect(self._db_path)
        except aiosqlite.Error as e:
            raise ConnectivityError(f"Cannot open database {self._db_path}: {e}") from e

        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute("PRAGMA foreign_keys = ON;")
            # Forces SQLite to actually read the file header.
            await conn.execute("SELECT 1;")
        except aiosqlite.Error as e:
            await conn.close()
            raise ConnectivityError(f"Cannot use database {self._db_path}: {e}") from e

        self._conn = conn
        logger.debug("Opened database %s", self._db_path)

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None

    async def reconnect(self) -> None:
        """Close and reopen the handle. No-op for in-memory databases."""
        if self.in_memory:
            logger.debug("Skipping reconnect for in-memory database")
            return
        await self.close()
        await self.open()

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Store is not open. Call await store.open() first.")
        return self._conn

    async def execute(self, sql: str, params: Params = ()) -> int:
        """Execute one statement and return the affected row count."""
        conn = self._require_conn()
        cursor = await conn.execute(sql, params)
        rowcount = cursor.rowcount
        await cursor.close()
        return rowcount

    async def fetch_all(self, sql: str, params: Params = ()) -> list[aiosqlite.Row]:
        conn = self._require_conn()
        cursor = await conn.execute(sql, params)
        rows = await cursor.fetchall()
        await cursor.close()
        return list(rows)

    async def fetch_one(self, sql: str, params: Params = ()) -> aiosqlite.Row | None:
        conn = self._require_conn()
        cursor = await conn.execute(sql, params)
        row = await cursor.fetchone()
        await cursor.close()
        return row

    async def commit(self) -> None:
        conn = self._require_conn()
        await conn.commit()

    async def rollback(self) -> None:
        conn = self._require_conn()
        await conn.rollback()

    async def __aenter__(self) -> Store:
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
