# Educational Story Generator - Core Domain

# Re-export types for convenient access
from .types import (
    GenerationRequest,
    AcceptedDraft,
    RejectedDraft,
    StoryDraft,
    GeneratedStory,
)

__all__ = [
    "GenerationRequest",
    "AcceptedDraft",
    "RejectedDraft",
    "StoryDraft",
    "GeneratedStory",
]
