"""
Core domain package.

This package holds the store handle and the schema bootstrap logic. It has no
knowledge of the HTTP layer or of any UI; the only collaborators are a store
path, a migration directory, and raw SQL.

We intentionally keep exports minimal; consumers should usually import from the
specific module they need (e.g. `dramadb.core.db.engine`).
"""

from __future__ import annotations

__all__: list[str] = [
    "CoreError",
    "NotFoundError",
    "ConfigError",
    "ConnectivityError",
    "SchemaAbsentError",
    "MigrationReadError",
    "StatementExecutionError",
    "LedgerError",
    "SeedingError",
]


class CoreError(Exception):
    """Base class for core-layer exceptions."""


class NotFoundError(CoreError):
    """Raised when the migration root (or any migration in it) cannot be found."""


class ConfigError(CoreError):
    """Raised when configuration cannot be loaded."""


class ConnectivityError(CoreError):
    """Raised when the store cannot be reached at all. Always fatal."""


class SchemaAbsentError(CoreError):
    """The application schema does not exist yet (triggers a fresh bootstrap)."""

    def __init__(self, table: str) -> None:
        super().__init__(f"Table {table!r} does not exist")
        self.table = table


class MigrationReadError(CoreError):
    """Raised when a migration script is missing or unreadable."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Cannot read migration {name}: {reason}")
        self.name = name


class StatementExecutionError(CoreError):
    """
    Raised when one statement of a migration script fails.

    The driver error is chained as `__cause__`.
    """

    def __init__(self, migration: str, index: int, statement: str, reason: str) -> None:
        super().__init__(f"Migration {migration}: statement {index} failed: {reason}")
        self.migration = migration
        self.index = index
        self.statement = statement


class LedgerError(CoreError):
    """Raised when the migration ledger cannot be created or written."""


class SeedingError(CoreError):
    """Raised when default data cannot be written."""
