"""
Tests for dramadb.core.db.seeder.
"""

from __future__ import annotations

import pytest

from dramadb.config import DEFAULT_MIGRATIONS_DIR
from dramadb.core import SeedingError
from dramadb.core.db.seed_catalog import PROMPT_TEMPLATES, STYLE_PRESETS
from dramadb.core.db.seeder import DefaultDataSeeder
from dramadb.core.db.source import MigrationSource
from dramadb.core.db.splitter import split_statements
from dramadb.core.store import Store


async def snapshot(store: Store) -> dict[str, list[tuple]]:
    return {
        "users": [
            tuple(r)
            for r in await store.fetch_all("SELECT id, openid, nickname, role FROM users ORDER BY id;")
        ],
        "system_prompts": [
            tuple(r)
            for r in await store.fetch_all(
                "SELECT id, type, name, content, is_default FROM system_prompts ORDER BY id;"
            )
        ],
        "styles": [
            tuple(r)
            for r in await store.fetch_all(
                "SELECT id, name, image_url, prompt, user_id FROM styles ORDER BY id;"
            )
        ],
    }


class TestDefaultDataSeeder:
    """Tests for baseline row seeding."""

    @pytest.fixture
    async def store(self) -> Store:
        """In-memory database with the shipped schema."""
        store = Store(":memory:")
        await store.open()
        source = MigrationSource(DEFAULT_MIGRATIONS_DIR)
        for statement in split_statements(source.read_script(source.latest()).sql):
            await store.execute(statement)
        await store.commit()
        yield store
        await store.close()

    async def test_seeds_empty_store(self, store: Store) -> None:
        result = await DefaultDataSeeder(store).run()

        assert result.ok
        assert result.applied == ["users", "system_prompts", "styles"]
        data = await snapshot(store)
        assert data["users"] == [(1, "local_default_user", "本地管理员", "PERMANENT")]
        assert [r[1] for r in data["system_prompts"]] == [p.type for p in PROMPT_TEMPLATES]
        assert len(data["styles"]) == len(STYLE_PRESETS)
        assert all(r[4] == 0 for r in data["styles"])

    async def test_second_run_is_noop(self, store: Store) -> None:
        """Re-running seeding leaves identical rows and writes nothing."""
        seeder = DefaultDataSeeder(store)
        await seeder.run()
        first = await snapshot(store)

        result = await seeder.run()

        assert result.ok
        assert result.applied == []
        assert await snapshot(store) == first
        summary = seeder.last_summary
        assert summary is not None
        assert summary.users_created == 0
        assert summary.prompts_unchanged == len(PROMPT_TEMPLATES)
        assert summary.styles_unchanged == len(STYLE_PRESETS)

    async def test_existing_user_blocks_default_user(self, store: Store) -> None:
        """The default user is only created in an empty users table."""
        await store.execute(
            "INSERT INTO users (id, openid, role, updated_at) VALUES (7, 'someone', 'REGULAR', CURRENT_TIMESTAMP);"
        )
        await store.commit()

        await DefaultDataSeeder(store).run()

        rows = await store.fetch_all("SELECT id FROM users;")
        assert [r["id"] for r in rows] == [7]

    async def test_prompt_content_converges(self, store: Store) -> None:
        """Edited templates are restored to the shipped catalog by id."""
        seeder = DefaultDataSeeder(store)
        await seeder.run()
        await store.execute(
            "UPDATE system_prompts SET content = 'edited', name = 'x' WHERE id = 1;"
        )
        await store.commit()

        await seeder.run()

        row = await store.fetch_one("SELECT name, content FROM system_prompts WHERE id = 1;")
        assert row["name"] == PROMPT_TEMPLATES[0].name
        assert row["content"] == PROMPT_TEMPLATES[0].content
        assert seeder.last_summary is not None
        assert seeder.last_summary.prompts_updated == 1

    async def test_style_prompt_updated_in_place(self, store: Store) -> None:
        """A preset found by natural key gets its prompt updated, not duplicated."""
        preset = STYLE_PRESETS[0]
        await store.execute(
            """
            INSERT INTO styles (id, name, image_url, prompt, user_id, updated_at)
            VALUES (42, ?, ?, 'old prompt', 0, CURRENT_TIMESTAMP);
            """,
            (preset.name, preset.image_url),
        )
        await store.commit()

        seeder = DefaultDataSeeder(store)
        await seeder.run()

        rows = await store.fetch_all(
            "SELECT id, prompt FROM styles WHERE name = ?;", (preset.name,)
        )
        assert [(r["id"], r["prompt"]) for r in rows] == [(42, preset.prompt)]
        assert seeder.last_summary is not None
        assert seeder.last_summary.styles_updated == 1
        assert seeder.last_summary.styles_inserted == len(STYLE_PRESETS) - 1

    async def test_same_name_other_owner_is_separate(self, store: Store) -> None:
        """A user's own style with a preset's name is not the preset."""
        preset = STYLE_PRESETS[0]
        await store.execute(
            """
            INSERT INTO styles (name, image_url, prompt, user_id, updated_at)
            VALUES (?, ?, 'mine', 1, CURRENT_TIMESTAMP);
            """,
            (preset.name, preset.image_url),
        )
        await store.commit()

        await DefaultDataSeeder(store).run()

        rows = await store.fetch_all(
            "SELECT user_id, prompt FROM styles WHERE name = ? ORDER BY user_id;", (preset.name,)
        )
        assert [(r["user_id"], r["prompt"]) for r in rows] == [(0, preset.prompt), (1, "mine")]


class TestSeedingFailure:
    """Seeding problems are reported, never raised from run()."""

    async def test_missing_tables_reported(self) -> None:
        store = Store(":memory:")
        await store.open()

        seeder = DefaultDataSeeder(store)
        result = await seeder.run()

        assert not result.ok
        assert isinstance(result.error, SeedingError)
        assert seeder.last_summary is None
        with pytest.raises(SeedingError):
            await seeder.seed()
        await store.close()
