"""
Story orchestration: one text call, then a fixed-size illustration fan-out.

Flow:
1. Ask the text model for a tagged draft (accepted / rejected)
2. Reject the request if the model refused the topic
3. Require exactly STORY_CONSTANTS["image_count"] image prompts
4. Illustrate all prompts concurrently, dropping failed slots
5. Assemble the GeneratedStory
"""

import asyncio
import logging
from typing import Optional

from google import genai
from google.genai import types

from ...config import GENERATION_TIMEOUT, MODEL_CONSTANTS, STORY_CONSTANTS, get_story_config
from ..errors import PolicyRejected, UpstreamError
from ..prompts import DEFAULT_REJECTION_REASON, STORY_RESPONSE_SCHEMA, build_story_prompt, parse_story_draft
from ..types import AcceptedDraft, GeneratedStory, RejectedDraft, StoryDraft
from .illustrator import Illustrator

logger = logging.getLogger(__name__)


def is_safety_blocked(response) -> bool:
    """True when Gemini's own safety filter stopped the response."""
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None and feedback.block_reason:
        return True

    candidates = response.candidates or []
    return bool(candidates) and candidates[0].finish_reason == types.FinishReason.SAFETY


class StoryOrchestrator:
    """
    Generate an illustrated educational story from a concept and an interest.

    Text generation failures abort the request; illustration failures are
    isolated per image.
    """

    def __init__(
        self,
        client: genai.Client,
        illustrator: Optional[Illustrator] = None,
        timeout: float = GENERATION_TIMEOUT,
    ):
        self.client = client
        self.model = MODEL_CONSTANTS["text_model"]
        self.illustrator = illustrator or Illustrator(client, timeout=timeout)
        self.timeout = timeout

    async def write_draft(self, concept: str, interest: str) -> StoryDraft:
        """
        Run the structured text call.

        Raises:
            UpstreamError: If the call fails, times out, or returns unusable JSON
        """
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=build_story_prompt(concept, interest),
                    config=get_story_config(STORY_RESPONSE_SCHEMA),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Story text generation timed out after {self.timeout}s")
            raise UpstreamError() from e
        except Exception as e:
            logger.error(f"Story text generation failed: {type(e).__name__}: {e}")
            raise UpstreamError() from e

        if is_safety_blocked(response):
            return RejectedDraft(reason=DEFAULT_REJECTION_REASON)

        return parse_story_draft(response.text)

    async def generate(self, concept: str, interest: str) -> GeneratedStory:
        """
        Generate the full story.

        Raises:
            PolicyRejected: If the model refused the topic (message is its reason)
            UpstreamError: If the text call failed or returned malformed data
        """
        draft = await self.write_draft(concept, interest)

        if isinstance(draft, RejectedDraft):
            logger.warning(
                f"Content rejected (concept length: {len(concept)}, interest length: {len(interest)})"
            )
            raise PolicyRejected(draft.reason)

        if len(draft.image_prompts) != STORY_CONSTANTS["image_count"]:
            logger.error(f"Expected {STORY_CONSTANTS['image_count']} image prompts, got {len(draft.image_prompts)}")
            raise UpstreamError("malformed upstream response")

        return await self._illustrate(draft)

    async def _illustrate(self, draft: AcceptedDraft) -> GeneratedStory:
        slots = await self.illustrator.illustrate_all(draft.image_prompts)
        images = [image for image in slots if image is not None]

        if len(images) < len(slots):
            logger.warning(f"{len(slots) - len(images)} of {len(slots)} illustrations failed")

        return GeneratedStory(
            title=draft.title,
            content=draft.content,
            moral_or_fact=draft.moral_or_fact,
            images=images,
        )
