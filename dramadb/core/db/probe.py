"""Fresh vs. existing database detection."""

from __future__ import annotations

import re

import aiosqlite

from dramadb.core import SchemaAbsentError
from dramadb.core.log import get_logger
from dramadb.core.db.models import ProbeResult
from dramadb.core.store import Store

logger = get_logger(__name__)

DEFAULT_PROBE_TABLE = "users"

# SQLite says "no such table"; other drivers phrase it as "does not exist".
_MISSING_TABLE_RE = re.compile(r"no such table|does not exist", re.IGNORECASE)


def is_missing_table_error(error: BaseException) -> bool:
    return isinstance(error, aiosqlite.OperationalError) and bool(
        _MISSING_TABLE_RE.search(str(error))
    )


class SchemaProbe:
    """
    Decides whether the application schema exists by counting rows of a
    table that only exists once the schema has been created.
    """

    def __init__(self, store: Store, table: str = DEFAULT_PROBE_TABLE) -> None:
        self._store = store
        self._table = table

    @property
    def table(self) -> str:
        return self._table

    async def check(self) -> None:
        """
        Raise `SchemaAbsentError` when the probe table is missing.

        Any other driver error propagates unchanged and is fatal to startup.
        """
        try:
            await self._store.fetch_one(f'SELECT COUNT(*) FROM "{self._table}";')
        except aiosqlite.OperationalError as e:
            if is_missing_table_error(e):
                raise SchemaAbsentError(self._table) from e
            raise

    async def probe(self) -> ProbeResult:
        """`fresh` is True when the schema has not been created yet."""
        try:
            await self.check()
        except SchemaAbsentError:
            logger.info("Database tables do not exist, need initial migration")
            return ProbeResult(fresh=True, table=self._table)
        logger.info("Database tables exist")
        return ProbeResult(fresh=False, table=self._table)
