"""Pydantic models for API responses and persisted records."""

from .records import StoryLogRecord
from .responses import AudioResponse, ErrorResponse, ShareResponse, StoryResponse

__all__ = [
    "StoryLogRecord",
    "AudioResponse",
    "ErrorResponse",
    "ShareResponse",
    "StoryResponse",
]
