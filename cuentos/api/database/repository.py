"""Repository for story log CRUD operations using raw asyncpg SQL."""

import json
import uuid
from typing import Optional

import asyncpg

from ...core.types import GeneratedStory
from ..models.records import StoryLogRecord


def _updated(status: str) -> bool:
    """asyncpg returns e.g. 'UPDATE 1'; True when a row was touched."""
    return status.split()[-1] != "0"


class StoryLogRepository:
    """Repository for story log persistence operations.

    Accepts anything with the asyncpg query API (a Connection or a Pool).
    """

    def __init__(self, conn: asyncpg.Connection | asyncpg.Pool):
        self.conn = conn

    async def create_story_log(self, concept: str, interests: str, story: GeneratedStory) -> str:
        """Insert a completed story and return its id."""
        story_id = str(uuid.uuid4())
        await self.conn.execute(
            """
            INSERT INTO story_logs (id, concept, interests, story_content, listened)
            VALUES ($1, $2, $3, $4, FALSE)
            """,
            story_id,
            concept,
            interests,
            json.dumps(story.to_dict(), ensure_ascii=False),
        )
        return story_id

    async def get_story_log(self, story_id: str) -> Optional[StoryLogRecord]:
        """Get a story log by id."""
        row = await self.conn.fetchrow(
            """
            SELECT id, created_at, concept, interests, story_content,
                   listened, audio_data, share_message
            FROM story_logs
            WHERE id = $1
            """,
            story_id,
        )
        if row is None:
            return None
        return StoryLogRecord(**dict(row))

    async def mark_listened(self, story_id: str) -> bool:
        """Flip the listened flag. Returns False if the story does not exist."""
        status = await self.conn.execute(
            "UPDATE story_logs SET listened = TRUE WHERE id = $1",
            story_id,
        )
        return _updated(status)

    async def update_audio(self, story_id: str, audio_data: str) -> bool:
        """Cache synthesized narration for a story."""
        status = await self.conn.execute(
            "UPDATE story_logs SET audio_data = $2 WHERE id = $1",
            story_id,
            audio_data,
        )
        return _updated(status)

    async def update_share_message(self, story_id: str, message: str) -> bool:
        """Cache the share caption for a story."""
        status = await self.conn.execute(
            "UPDATE story_logs SET share_message = $2 WHERE id = $1",
            story_id,
            message,
        )
        return _updated(status)
