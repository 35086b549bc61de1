"""
dramadb - Entry Point

Run with: python -m dramadb [init|status|seed]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import aiosqlite

from dramadb import __version__
from dramadb.config import DbConfig, load_db_config
from dramadb.core import CoreError
from dramadb.core.bootstrap import database_status, initialize_database, seed_database


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="dramadb",
        description="Create, migrate and seed the drama studio database",
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=("init", "status", "seed"),
        default="init",
        help="init: migrate and seed (default); status: show ledger and pending; seed: seed only",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file with a [database] table",
    )

    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Database URL, e.g. file:./data/dev.db (overrides DATABASE_URL)",
    )

    parser.add_argument(
        "--migrations-dir",
        type=Path,
        default=None,
        help="Directory holding one subdirectory per migration",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DbConfig:
    config = load_db_config(args.config)
    if args.database_url:
        config.database_url = args.database_url
    if args.migrations_dir:
        config.migrations_dir = args.migrations_dir
    return config


async def run_command(command: str, config: DbConfig) -> int:
    if command == "status":
        status = await database_status(config)
        print(f"Database: {config.database_url}")
        print(f"State: {'fresh (schema absent)' if status.fresh else 'existing'}")
        for entry in status.entries:
            finished = entry.finished_at or "unfinished"
            print(f"  {entry.migration_name}  {finished}  steps={entry.applied_steps_count}")
        if status.pending:
            print("Pending:")
            for name in status.pending:
                print(f"  {name}")
        else:
            print("Pending: none")
        return 0

    if command == "seed":
        result = await seed_database(config)
        return 0 if result.ok else 1

    await initialize_database(config)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
        return asyncio.run(run_command(args.command, config))
    except (CoreError, aiosqlite.Error, ValueError) as e:
        logger.error("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
