"""
Tests for dramadb.core.store.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dramadb.core import ConnectivityError
from dramadb.core.store import Store, database_path_from_url, ensure_database_dir


class TestDatabasePath:
    """Tests for connection string handling."""

    def test_strips_file_prefix(self) -> None:
        assert database_path_from_url("file:./dev.db") == "./dev.db"
        assert database_path_from_url("file:/var/lib/app/app.db") == "/var/lib/app/app.db"

    def test_plain_path_and_memory_pass_through(self) -> None:
        assert database_path_from_url("data/app.db") == "data/app.db"
        assert database_path_from_url(":memory:") == ":memory:"

    def test_empty_url_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            database_path_from_url("file:")

    def test_ensure_database_dir_creates_parents(self, tmp_path: Path) -> None:
        """The parent directory is created once and reported."""
        db_path = tmp_path / "a" / "b" / "app.db"

        assert ensure_database_dir(db_path) == tmp_path / "a" / "b"
        assert (tmp_path / "a" / "b").is_dir()
        assert ensure_database_dir(db_path) is None

    def test_ensure_database_dir_logs_with_tag(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Directory creation is logged with the same tag as the other steps."""
        db_dir = tmp_path / "data"

        with caplog.at_level(logging.INFO, logger="dramadb"):
            ensure_database_dir(db_dir / "app.db")

        messages = [r.getMessage() for r in caplog.records]
        assert messages == [f"[DB Init] Created database directory: {db_dir}"]

    def test_ensure_database_dir_skips_memory(self) -> None:
        assert ensure_database_dir(":memory:") is None


class TestStore:
    """Tests for the store handle."""

    async def test_open_close(self) -> None:
        """Test basic open/close lifecycle."""
        store = Store(":memory:")
        assert not store.is_open

        await store.open()
        assert store.is_open

        await store.close()
        assert not store.is_open

    async def test_unopened_store_raises(self) -> None:
        """Queries against a closed store are programming errors."""
        store = Store(":memory:")
        with pytest.raises(RuntimeError):
            await store.fetch_one("SELECT 1;")

    async def test_unreachable_database_is_connectivity_error(self, tmp_path: Path) -> None:
        """A database in a directory that does not exist cannot be opened."""
        store = Store(tmp_path / "missing" / "app.db")

        with pytest.raises(ConnectivityError):
            await store.open()
        assert not store.is_open

    async def test_execute_and_fetch(self) -> None:
        """Rows come back as mappings."""
        async with Store(":memory:") as store:
            await store.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT);")
            count = await store.execute("INSERT INTO t (name) VALUES (?);", ("a",))
            await store.commit()

            assert count == 1
            row = await store.fetch_one("SELECT id, name FROM t;")
            assert row is not None
            assert row["name"] == "a"
            assert len(await store.fetch_all("SELECT * FROM t;")) == 1

    async def test_reconnect_keeps_file_data(self, tmp_path: Path) -> None:
        """Reconnecting a file-backed store sees committed data."""
        store = Store(tmp_path / "app.db")
        await store.open()
        await store.execute("CREATE TABLE t (x INT);")
        await store.execute("INSERT INTO t VALUES (1);")
        await store.commit()

        await store.reconnect()
        row = await store.fetch_one("SELECT COUNT(*) AS c FROM t;")
        assert row["c"] == 1
        await store.close()

    async def test_reconnect_is_noop_in_memory(self) -> None:
        """An in-memory store keeps its data across reconnect."""
        store = Store(":memory:")
        await store.open()
        await store.execute("CREATE TABLE t (x INT);")

        await store.reconnect()
        assert await store.fetch_all("SELECT * FROM t;") == []
        await store.close()
