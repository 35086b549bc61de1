"""
Default data seeding.

Runs after the schema has converged. Every step is idempotent: a second run
writes nothing when the rows already match the catalog.
"""

from __future__ import annotations

from typing import Iterable

import aiosqlite

from dramadb.core import SeedingError
from dramadb.core.log import get_logger
from dramadb.core.db.models import PhaseResult, SeedSummary
from dramadb.core.db.seed_catalog import (
    DEFAULT_USER,
    PROMPT_TEMPLATES,
    STYLE_PRESETS,
    DefaultUser,
    PromptTemplate,
    StylePreset,
)
from dramadb.core.store import Store

logger = get_logger(__name__)

PHASE = "seeding"


class DefaultDataSeeder:
    def __init__(
        self,
        store: Store,
        *,
        user: DefaultUser = DEFAULT_USER,
        prompts: Iterable[PromptTemplate] = PROMPT_TEMPLATES,
        styles: Iterable[StylePreset] = STYLE_PRESETS,
    ) -> None:
        self._store = store
        self._user = user
        self._prompts = tuple(prompts)
        self._styles = tuple(styles)
        self.last_summary: SeedSummary | None = None

    async def run(self) -> PhaseResult:
        """
        Ensure baseline rows exist.

        Never raises for database problems: the failure is returned in the
        `PhaseResult` so startup can continue without seed data.
        """
        result = PhaseResult(phase=PHASE)
        try:
            summary = await self.seed()
        except SeedingError as e:
            logger.error("Failed to ensure default data: %s", e)
            result.error = e
            return result

        self.last_summary = summary
        if summary.users_created:
            result.applied.append("users")
        if summary.prompts_inserted or summary.prompts_updated:
            result.applied.append("system_prompts")
        if summary.styles_inserted or summary.styles_updated:
            result.applied.append("styles")
        logger.info("Default data check completed")
        return result

    async def seed(self) -> SeedSummary:
        """Run all seeding steps, raising `SeedingError` on the first failure."""
        try:
            users_created = await self._ensure_default_user()
            prompt_counts = await self._upsert_prompts()
            style_counts = await self._upsert_styles()
        except aiosqlite.Error as e:
            await self._safe_rollback()
            raise SeedingError(str(e)) from e

        return SeedSummary(
            users_created=users_created,
            prompts_inserted=prompt_counts[0],
            prompts_updated=prompt_counts[1],
            prompts_unchanged=prompt_counts[2],
            styles_inserted=style_counts[0],
            styles_updated=style_counts[1],
            styles_unchanged=style_counts[2],
        )

    async def _safe_rollback(self) -> None:
        try:
            await self._store.rollback()
        except aiosqlite.Error as e:
            logger.warning("Rollback after seeding failure failed: %s", e)

    async def _ensure_default_user(self) -> int:
        row = await self._store.fetch_one("SELECT COUNT(*) AS c FROM users;")
        if row is not None and int(row["c"]) > 0:
            return 0

        logger.info("Creating default user...")
        user = self._user
        await self._store.execute(
            """
            INSERT INTO users (id, openid, nickname, role, avatar, updated_at)
            VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP);
            """,
            (user.id, user.openid, user.nickname, user.role, user.avatar),
        )
        await self._store.commit()
        logger.info("Default user created")
        return 1

    async def _upsert_prompts(self) -> tuple[int, int, int]:
        inserted = updated = unchanged = 0
        for prompt in self._prompts:
            row = await self._store.fetch_one(
                "SELECT type, name, content, is_default FROM system_prompts WHERE id = ?;",
                (prompt.id,),
            )
            if row is None:
                await self._store.execute(
                    """
                    INSERT INTO system_prompts (id, type, name, content, is_default, updated_at)
                    VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP);
                    """,
                    (prompt.id, prompt.type, prompt.name, prompt.content, int(prompt.is_default)),
                )
                inserted += 1
            elif (
                row["type"] != prompt.type
                or row["name"] != prompt.name
                or row["content"] != prompt.content
                or bool(row["is_default"]) != prompt.is_default
            ):
                await self._store.execute(
                    """
                    UPDATE system_prompts
                    SET type = ?, name = ?, content = ?, is_default = ?,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?;
                    """,
                    (prompt.type, prompt.name, prompt.content, int(prompt.is_default), prompt.id),
                )
                updated += 1
            else:
                unchanged += 1
        await self._store.commit()
        logger.info(
            "System prompts: %d inserted, %d updated, %d unchanged", inserted, updated, unchanged
        )
        return inserted, updated, unchanged

    async def _upsert_styles(self) -> tuple[int, int, int]:
        inserted = updated = unchanged = 0
        for style in self._styles:
            # `IS` so a NULL image_url still matches itself.
            row = await self._store.fetch_one(
                """
                SELECT id, prompt FROM styles
                WHERE name = ? AND image_url IS ? AND user_id = ?
                ORDER BY id
                LIMIT 1;
                """,
                (style.name, style.image_url, style.user_id),
            )
            if row is None:
                await self._store.execute(
                    """
                    INSERT INTO styles (name, image_url, prompt, user_id, updated_at)
                    VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP);
                    """,
                    (style.name, style.image_url, style.prompt, style.user_id),
                )
                inserted += 1
            elif row["prompt"] != style.prompt:
                await self._store.execute(
                    "UPDATE styles SET prompt = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?;",
                    (style.prompt, row["id"]),
                )
                updated += 1
            else:
                unchanged += 1
        await self._store.commit()
        logger.info(
            "Default styles: %d inserted, %d updated, %d unchanged", inserted, updated, unchanged
        )
        return inserted, updated, unchanged
