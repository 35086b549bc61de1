"""
dramadb - schema bootstrap for the drama studio backend.

Brings the application's SQLite store to the current schema on every process
start, keeps a ledger of applied migrations, and seeds the baseline rows the
application needs (default user, prompt templates, style presets).
"""

__version__ = "0.1.0"
__author__ = "dramadb Contributors"
__license__ = "GPL-2.0"

from dramadb.core.bootstrap import initialize_database

__all__ = ["initialize_database", "__version__"]
