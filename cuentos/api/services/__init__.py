"""Services for story persistence."""

from .story_log_service import StoryLogService, permalink

__all__ = ["StoryLogService", "permalink"]
