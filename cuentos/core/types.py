"""
Centralized domain types for the educational story generator.

The generation request, the text model's draft (accepted or rejected)
and the final illustrated story.
"""

from dataclasses import dataclass, field
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from ..config.story import STORY_CONSTANTS


# =============================================================================
# Request
# =============================================================================


class GenerationRequest(BaseModel):
    """A learning concept framed by a personal interest."""

    model_config = ConfigDict(frozen=True)

    concept: StrictStr = Field(
        ...,
        min_length=1,
        max_length=STORY_CONSTANTS["max_field_length"],
        description="Academic concept the story should explain",
        examples=["photosynthesis", "how fractions work"],
    )
    interest: StrictStr = Field(
        ...,
        min_length=1,
        max_length=STORY_CONSTANTS["max_field_length"],
        description="Theme or fandom used to frame the story",
        examples=["football", "dinosaurs"],
    )


# =============================================================================
# Text model drafts
# =============================================================================


@dataclass(frozen=True)
class AcceptedDraft:
    """Story text produced by the model, before illustration."""

    title: str
    content: str
    moral_or_fact: str
    image_prompts: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RejectedDraft:
    """The model declined to write about the requested topic."""

    reason: str


StoryDraft = Union[AcceptedDraft, RejectedDraft]


# =============================================================================
# Final story
# =============================================================================


@dataclass(frozen=True)
class GeneratedStory:
    """A complete story: text plus 0-3 illustrations as data URIs, in prompt order."""

    title: str
    content: str
    moral_or_fact: str
    images: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Wire format (camelCase keys)."""
        return {
            "title": self.title,
            "content": self.content,
            "moralOrFact": self.moral_or_fact,
            "images": list(self.images),
        }

    def to_formatted_string(self, image_paths: list[str] | None = None) -> str:
        """Markdown rendering; images are referenced by path when given."""
        lines = [f"# {self.title}", ""]
        for i, path in enumerate(image_paths or [], start=1):
            lines.append(f"![Illustration {i}]({path})")
        if image_paths:
            lines.append("")
        lines.extend([self.content.strip(), "", "---", "", f"**What we learned today:** {self.moral_or_fact}", ""])
        return "\n".join(lines)

    @classmethod
    def from_dict(cls, data: dict) -> "GeneratedStory":
        """Rehydrate from the wire format."""
        return cls(
            title=data["title"],
            content=data["content"],
            moral_or_fact=data["moralOrFact"],
            images=list(data.get("images") or []),
        )


__all__ = [
    "GenerationRequest",
    "AcceptedDraft",
    "RejectedDraft",
    "StoryDraft",
    "GeneratedStory",
]
