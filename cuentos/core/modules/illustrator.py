"""
Module for generating story illustrations with Gemini image models.

One image call per prompt. Calls run concurrently and each slot fails
independently: a failed illustration is dropped, it never fails the story.
"""

import asyncio
import base64
import logging
from typing import Optional

from google import genai

from ...config import GENERATION_TIMEOUT, MODEL_CONSTANTS, STORY_CONSTANTS, get_image_config

logger = logging.getLogger(__name__)


def extract_image_data_uri(response) -> str:
    """
    Extract the first inline image from a Gemini response as a data URI.

    Args:
        response: The response from client.aio.models.generate_content()

    Returns:
        "data:<mime>;base64,<payload>"

    Raises:
        ValueError: If no image found in response
    """
    candidates = response.candidates or []
    parts = (candidates[0].content.parts or []) if candidates and candidates[0].content else []

    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline and inline.data:
            data = inline.data
            payload = data if isinstance(data, str) else base64.b64encode(data).decode("ascii")
            return f"data:{inline.mime_type};base64,{payload}"

    raise ValueError("No image found in response")


def build_image_prompt(prompt: str) -> str:
    """Append the house illustration style to a scene description."""
    return f"{prompt.rstrip('. ')}. {STORY_CONSTANTS['image_style_suffix']}."


class Illustrator:
    """
    Generate illustrations for a story.

    Each prompt is rendered in its own call; the batch is joined with
    asyncio.gather and every slot resolves to a data URI or None.
    """

    def __init__(self, client: genai.Client, timeout: float = GENERATION_TIMEOUT):
        self.client = client
        self.model = MODEL_CONSTANTS["image_model"]
        self.config = get_image_config()
        self.timeout = timeout

    async def illustrate(self, prompt: str) -> Optional[str]:
        """Generate one illustration. Returns None on any failure."""
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=build_image_prompt(prompt),
                    config=self.config,
                ),
                timeout=self.timeout,
            )
            return extract_image_data_uri(response)
        except asyncio.TimeoutError:
            logger.warning(f"Image generation timed out after {self.timeout}s")
            return None
        except Exception as e:
            logger.error(f"Error generating image: {type(e).__name__}: {e}")
            return None

    async def illustrate_all(self, prompts: list[str]) -> list[Optional[str]]:
        """
        Generate all illustrations concurrently.

        Returns:
            One entry per prompt, in prompt order (None for failed slots)
        """
        return list(await asyncio.gather(*(self.illustrate(p) for p in prompts)))
