"""Persisted record shapes."""

import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...core.types import GeneratedStory


class StoryLogRecord(BaseModel):
    """A row of the story_logs table."""

    id: str
    created_at: Optional[datetime] = None
    concept: str
    interests: str
    story_content: str  # JSON-serialized GeneratedStory
    listened: bool = False
    audio_data: Optional[str] = None
    share_message: Optional[str] = None

    def to_story(self) -> GeneratedStory:
        """Rehydrate the serialized story."""
        return GeneratedStory.from_dict(json.loads(self.story_content))
