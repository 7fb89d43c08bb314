"""Pydantic models for API responses.

Field names are camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...core.types import GeneratedStory


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoryResponse(CamelModel):
    """A generated (or rehydrated) story."""

    id: Optional[str] = Field(
        default=None,
        description="Story log id for the permalink; null when the story could not be saved",
    )
    title: str
    content: str
    moral_or_fact: str
    images: list[str] = Field(default_factory=list, description="Illustrations as data URIs, 0-3")

    @classmethod
    def from_story(cls, story: GeneratedStory, story_id: Optional[str] = None) -> "StoryResponse":
        return cls(
            id=story_id,
            title=story.title,
            content=story.content,
            moral_or_fact=story.moral_or_fact,
            images=list(story.images),
        )


class AudioResponse(CamelModel):
    """Narration for a story: base64 raw PCM, 16-bit little-endian, mono."""

    audio: str
    sample_rate: int = 24000
    cached: bool = Field(description="True when served from the story log instead of synthesized")


class ShareResponse(CamelModel):
    """Share caption and permalink for a story."""

    message: str
    url: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
