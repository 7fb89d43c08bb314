"""Story log service: persistence, listened flag and cached extras.

Writes are best-effort. A failed write is logged and swallowed so it can
never block or roll back a response. Reads that the caller depends on
(permalink, narration, share) raise instead.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ...core.errors import NarrationFailed, PersistenceUnavailable, StoryNotFound
from ...core.modules.share_caption import craft_share_caption
from ...core.types import GeneratedStory
from ..config import PUBLIC_BASE_URL
from ..database.repository import StoryLogRepository
from ..logging import story_logger
from ..models.records import StoryLogRecord

logger = logging.getLogger(__name__)

Synthesizer = Callable[[str], Awaitable[Optional[str]]]


def permalink(story_id: str) -> str:
    """Public URL of a shared story."""
    return f"{PUBLIC_BASE_URL}/story/{story_id}"


def _load_story(record: StoryLogRecord) -> GeneratedStory:
    """Rehydrate a record; unreadable content counts as a missing story."""
    try:
        return record.to_story()
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Stored story is unreadable: {e}", extra={"story_id": record.id})
        raise StoryNotFound() from e


class StoryLogService:
    """Service for the story_logs store.

    `repo` is None when no database is configured; writes then become no-ops
    and reads raise PersistenceUnavailable.
    """

    def __init__(self, repo: Optional[StoryLogRepository]):
        self.repo = repo

    async def log_story(self, concept: str, interest: str, story: GeneratedStory) -> Optional[str]:
        """Persist a completed story. Returns its id, or None if it was not saved."""
        if self.repo is None:
            logger.warning("DATABASE_URL not set - story not logged")
            return None

        try:
            story_id = await self.repo.create_story_log(concept, interest, story)
        except Exception as e:
            story_logger.persistence_failed("insert", e)
            return None

        logger.info("Story logged", extra={"story_id": story_id})
        return story_id

    async def get_record(self, story_id: str) -> StoryLogRecord:
        """
        Fetch a story log.

        Raises:
            PersistenceUnavailable: If the store is unconfigured or unreachable
            StoryNotFound: If no story has this id
        """
        if self.repo is None:
            raise PersistenceUnavailable()

        try:
            record = await self.repo.get_story_log(story_id)
        except Exception as e:
            story_logger.persistence_failed("select", e, story_id)
            raise PersistenceUnavailable() from e

        if record is None:
            raise StoryNotFound()
        return record

    async def get_story(self, story_id: str) -> GeneratedStory:
        """Rehydrate a shared story from its log."""
        return _load_story(await self.get_record(story_id))

    async def mark_listened(self, story_id: str) -> bool:
        """Flip the listened flag. Best-effort."""
        if self.repo is None:
            return False

        try:
            return await self.repo.mark_listened(story_id)
        except Exception as e:
            story_logger.persistence_failed("listened update", e, story_id)
            return False

    async def get_or_create_audio(self, story_id: str, synthesize: Synthesizer) -> tuple[str, bool]:
        """
        Read-through narration cache.

        Returns cached audio when the log has it; otherwise synthesizes the
        story content, writes it back (best-effort) and returns it.

        Returns:
            (base64 PCM audio, whether it came from the cache)

        Raises:
            NarrationFailed: If synthesis returned nothing
        """
        record = await self.get_record(story_id)
        if record.audio_data:
            return record.audio_data, True

        story = _load_story(record)
        audio = await synthesize(story.content)
        if not audio:
            raise NarrationFailed()

        try:
            await self.repo.update_audio(story_id, audio)
        except Exception as e:
            story_logger.persistence_failed("audio update", e, story_id)

        return audio, False

    async def get_or_create_share_message(self, story_id: str) -> str:
        """Cached share caption for a story, crafted on first request."""
        record = await self.get_record(story_id)
        if record.share_message:
            return record.share_message

        story = _load_story(record)
        message = await asyncio.to_thread(
            craft_share_caption, record.concept, record.interests, story.title
        )

        try:
            await self.repo.update_share_message(story_id, message)
        except Exception as e:
            story_logger.persistence_failed("share update", e, story_id)

        return message
