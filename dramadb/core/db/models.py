"""
DTOs for the schema bootstrap components.

This module is intentionally lightweight:
- No DB connection knowledge
- No SQL
- Pure dataclasses
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dramadb.core import CoreError


@dataclass(frozen=True, slots=True)
class MigrationScript:
    """
    One migration as read from disk.

    `name` is the directory name (timestamp prefixed, so lexical order is
    application order).
    """

    name: str
    sql: str
    path: Path
    # SHA-256 hex digest of the file bytes as stored on disk.
    checksum: str


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """A row of the `_prisma_migrations` ledger table."""

    id: str
    checksum: str
    migration_name: str
    started_at: str | None
    finished_at: str | None
    applied_steps_count: int
    logs: str | None = None
    rolled_back_at: str | None = None

    @property
    def is_applied(self) -> bool:
        return self.finished_at is not None


@dataclass(frozen=True, slots=True)
class ProbeResult:
    fresh: bool
    table: str


class EngineState(Enum):
    UNPROBED = "unprobed"
    FRESH_BOOTSTRAP = "fresh_bootstrap"
    INCREMENTAL_APPLY = "incremental_apply"
    SEEDED = "seeded"
    READY = "ready"


@dataclass
class PhaseResult:
    """
    Outcome of a best-effort phase (incremental apply or seeding).

    Phases never raise for recoverable problems; they report them here and the
    engine decides whether to continue.
    """

    phase: str
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: CoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class SeedSummary:
    users_created: int = 0
    prompts_inserted: int = 0
    prompts_updated: int = 0
    prompts_unchanged: int = 0
    styles_inserted: int = 0
    styles_updated: int = 0
    styles_unchanged: int = 0


@dataclass
class InitReport:
    """What happened during one `MigrationEngine.initialize()` call."""

    state: EngineState = EngineState.UNPROBED
    fresh: bool = False
    bootstrap_migration: str | None = None
    migrations: PhaseResult | None = None
    seeding: PhaseResult | None = None
    seed_summary: SeedSummary | None = None
