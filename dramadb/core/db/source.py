"""
Migration catalog on disk.

Layout:
    <root>/
        migration_lock.toml          (metadata, ignored)
        20260127074920_init/
            migration.sql
        20260301120000_add_column/
            migration.sql
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from dramadb.core import MigrationReadError, NotFoundError
from dramadb.core.db.models import MigrationScript

SCRIPT_FILENAME = "migration.sql"


class MigrationSource:
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def exists(self) -> bool:
        return self._root.is_dir()

    def list_all(self) -> list[str]:
        """Migration names in application order (lexical on directory name)."""
        if not self.exists():
            raise NotFoundError(f"Migration directory not found: {self._root}")
        return sorted(entry.name for entry in self._root.iterdir() if entry.is_dir())

    def latest(self) -> str:
        names = self.list_all()
        if not names:
            raise NotFoundError(f"No migration folders found in {self._root}")
        return names[-1]

    def script_path(self, name: str) -> Path:
        return self._root / name / SCRIPT_FILENAME

    def read_script(self, name: str) -> MigrationScript:
        path = self.script_path(name)
        if not path.is_file():
            raise MigrationReadError(name, f"file not found: {path}")
        try:
            raw = path.read_bytes()
            sql = raw.decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MigrationReadError(name, str(e)) from e
        # Line endings are left as they are so the checksum matches the file.
        return MigrationScript(
            name=name,
            sql=sql,
            path=path,
            checksum=hashlib.sha256(raw).hexdigest(),
        )
