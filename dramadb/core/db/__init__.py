"""
Schema bootstrap subpackage.

Split into small units (splitter, migration source, ledger, probe, seeder)
with `MigrationEngine` as the single entry point the rest of the codebase
uses. Re-exports here are for convenience.
"""

from __future__ import annotations

# Models / DTOs
from .models import (
    EngineState,
    InitReport,
    LedgerEntry,
    MigrationScript,
    PhaseResult,
    ProbeResult,
    SeedSummary,
)

# Components
from .engine import MigrationEngine, compute_pending
from .ledger import LEDGER_TABLE, Ledger
from .probe import SchemaProbe
from .seeder import DefaultDataSeeder
from .source import MigrationSource
from .splitter import split_statements

__all__ = [
    # models
    "EngineState",
    "InitReport",
    "LedgerEntry",
    "MigrationScript",
    "PhaseResult",
    "ProbeResult",
    "SeedSummary",
    # components
    "DefaultDataSeeder",
    "LEDGER_TABLE",
    "Ledger",
    "MigrationEngine",
    "MigrationSource",
    "SchemaProbe",
    "compute_pending",
    "split_statements",
]
