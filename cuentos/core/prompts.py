"""
Prompt and response schema for the story text call.

The model answers with a tagged JSON object: `outcome` is either
"accepted" (story fields filled in) or "rejected" (only `rejectionReason`).
"""

import json

from ..config.story import STORY_CONSTANTS
from .errors import UpstreamError
from .types import AcceptedDraft, RejectedDraft, StoryDraft

OUTCOME_ACCEPTED = "accepted"
OUTCOME_REJECTED = "rejected"

DEFAULT_REJECTION_REASON = "Content not allowed for safety reasons"

STORY_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "outcome": {
            "type": "STRING",
            "enum": [OUTCOME_ACCEPTED, OUTCOME_REJECTED],
            "description": "\"rejected\" when the topic violates the safety rules, otherwise \"accepted\".",
        },
        "rejectionReason": {
            "type": "STRING",
            "nullable": True,
            "description": "Short explanation for the student when outcome is \"rejected\".",
        },
        "title": {
            "type": "STRING",
            "nullable": True,
            "description": "A creative title for the story.",
        },
        "content": {
            "type": "STRING",
            "nullable": True,
            "description": "The full story text, in clear paragraphs.",
        },
        "moralOrFact": {
            "type": "STRING",
            "nullable": True,
            "description": "A brief takeaway or fun fact summarizing what was learned.",
        },
        "imagePrompts": {
            "type": "ARRAY",
            "nullable": True,
            "description": "Detailed visual descriptions of key moments, one per illustration.",
            "items": {"type": "STRING"},
        },
    },
    "required": ["outcome"],
    "property_ordering": ["outcome", "rejectionReason", "title", "content", "moralOrFact", "imagePrompts"],
}


def build_story_prompt(concept: str, interest: str) -> str:
    """Build the single structured prompt for the story text call."""
    min_words = STORY_CONSTANTS["min_word_count"]
    image_count = STORY_CONSTANTS["image_count"]

    return f"""You are an expert teacher and a responsible, creative storyteller.

SAFETY RULES:
- Do not write about violence, weapons, explosives or dangerous activities.
- Do not write sexual content or anything inappropriate for minors.
- Do not write content that promotes hate, discrimination or harassment.
- If the request breaks these rules, set "outcome" to "{OUTCOME_REJECTED}" and explain why in "rejectionReason", in Spanish. Leave every other field empty.

GOAL: explain the ACADEMIC CONCEPT "{concept}" through a story built around the STUDENT'S INTEREST "{interest}".

Requirements:
1. The story must be exciting and use the tropes, characters or setting of the interest.
2. The explanation of the concept must be accurate and didactic, woven into the plot.
3. The tone must be inspiring and suitable for a student.
4. Write in ARGENTINE SPANISH (Rioplatense): use "vos" and its conjugations. Use colloquial expressions sparingly and keep a friendly, natural tone suitable for children.
5. The story must have AT LEAST {min_words} words. Count them before answering and keep developing scenes and dialogue until you reach the minimum.
6. Structure: introduction (100+ words), development explaining the concept (300+ words), conclusion (100+ words).
7. Write EXACTLY {image_count} detailed visual descriptions in "imagePrompts", each illustrating a key moment of the story.
8. Set "outcome" to "{OUTCOME_ACCEPTED}" and answer in JSON."""


def parse_story_draft(text: str | None) -> StoryDraft:
    """
    Parse the model's JSON answer into an accepted or rejected draft.

    Raises:
        UpstreamError: If the answer is not valid JSON or an accepted draft
            is missing one of its text fields.
    """
    try:
        data = json.loads(text or "")
    except json.JSONDecodeError as e:
        raise UpstreamError() from e

    if not isinstance(data, dict):
        raise UpstreamError()

    outcome = data.get("outcome")
    if outcome == OUTCOME_REJECTED:
        reason = data.get("rejectionReason")
        if not isinstance(reason, str) or not reason.strip():
            reason = DEFAULT_REJECTION_REASON
        return RejectedDraft(reason=reason.strip())

    if outcome != OUTCOME_ACCEPTED:
        raise UpstreamError()

    fields = {key: data.get(key) for key in ("title", "content", "moralOrFact")}
    if not all(isinstance(value, str) and value.strip() for value in fields.values()):
        raise UpstreamError()

    prompts = data.get("imagePrompts")
    if not isinstance(prompts, list):
        prompts = []

    return AcceptedDraft(
        title=fields["title"],
        content=fields["content"],
        moral_or_fact=fields["moralOrFact"],
        image_prompts=[p for p in prompts if isinstance(p, str)],
    )
