"""
Configuration management for dramadb.

Settings come from an optional TOML file and the environment, the environment
winning. Example `dramadb.toml`:

    [database]
    url = "file:./data/dev.db"
    migrations_dir = "migrations"
    probe_table = "users"
    record_baseline = false
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from dramadb.core import ConfigError

logger = logging.getLogger(__name__)

# Migrations shipped inside the package
DEFAULT_MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"
DEFAULT_DATABASE_URL = "file:./dev.db"
DEFAULT_PROBE_TABLE = "users"

ENV_DATABASE_URL = "DATABASE_URL"
ENV_MIGRATIONS_DIR = "DRAMADB_MIGRATIONS_DIR"
ENV_CONFIG = "DRAMADB_CONFIG"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class DbConfig:
    """Loaded database configuration."""

    database_url: str = DEFAULT_DATABASE_URL
    migrations_dir: Path = field(default_factory=lambda: DEFAULT_MIGRATIONS_DIR)
    probe_table: str = DEFAULT_PROBE_TABLE
    # Write ledger rows for the catalog after a fresh bootstrap.
    record_baseline: bool = False


def _parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _read_toml(config_path: Path) -> dict[str, object]:
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    section = data.get("database", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[database] in {config_path} must be a table")
    return section


def load_db_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DbConfig:
    """
    Load database configuration.

    Args:
        config_path: TOML file to read. If None, `DRAMADB_CONFIG` is used when set;
            otherwise only defaults and environment apply.
        environ: Environment mapping (defaults to `os.environ`).

    Returns:
        Loaded DbConfig instance.
    """
    env = os.environ if environ is None else environ
    config = DbConfig()

    if config_path is None and env.get(ENV_CONFIG):
        config_path = Path(env[ENV_CONFIG])

    if config_path is not None:
        logger.debug("Loading database config from %s", config_path)
        section = _read_toml(config_path)
        if "url" in section:
            config.database_url = str(section["url"])
        if "migrations_dir" in section:
            migrations_dir = Path(str(section["migrations_dir"]))
            if not migrations_dir.is_absolute():
                migrations_dir = config_path.parent / migrations_dir
            config.migrations_dir = migrations_dir
        if "probe_table" in section:
            config.probe_table = str(section["probe_table"])
        if "record_baseline" in section:
            config.record_baseline = _parse_bool(section["record_baseline"])

    if env.get(ENV_DATABASE_URL):
        config.database_url = env[ENV_DATABASE_URL]
    if env.get(ENV_MIGRATIONS_DIR):
        config.migrations_dir = Path(env[ENV_MIGRATIONS_DIR])

    return config


# Global singleton instance (lazy loaded)
_db_config: DbConfig | None = None


def get_db_config() -> DbConfig:
    """
    Get the global database configuration (lazy loaded singleton).

    Returns:
        The DbConfig instance.
    """
    global _db_config

    if _db_config is None:
        _db_config = load_db_config()

    return _db_config


def reload_db_config() -> DbConfig:
    """
    Force reload of database configuration.

    Returns:
        The newly loaded DbConfig instance.
    """
    global _db_config
    _db_config = load_db_config()
    return _db_config
