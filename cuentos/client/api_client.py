"""Async HTTP client for the story API."""

import logging
from typing import Optional

import httpx

from ..core.types import GeneratedStory

logger = logging.getLogger(__name__)

# Generation makes one text call and three image calls; give it room
DEFAULT_TIMEOUT = 300.0


class StoryApiError(Exception):
    """The API answered with an error body."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _raise_for_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        message = response.json().get("error") or response.text
    except ValueError:
        message = response.text
    raise StoryApiError(response.status_code, message)


class StoryClient:
    """Client for /api/generate-story and the /story/{id} endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def generate_story(self, concept: str, interest: str) -> tuple[GeneratedStory, Optional[str]]:
        """Generate a story. Returns the story and its permalink id (None if unsaved)."""
        response = await self._client.post(
            "/api/generate-story",
            json={"concept": concept, "interest": interest},
        )
        _raise_for_error(response)
        data = response.json()
        return GeneratedStory.from_dict(data), data.get("id")

    async def get_story(self, story_id: str) -> GeneratedStory:
        """Resolve a permalink."""
        response = await self._client.get(f"/story/{story_id}")
        _raise_for_error(response)
        return GeneratedStory.from_dict(response.json())

    async def fetch_audio(self, story_id: str) -> Optional[str]:
        """Narration as base64 PCM, or None if it could not be produced."""
        try:
            response = await self._client.post(f"/story/{story_id}/audio")
            _raise_for_error(response)
        except (httpx.HTTPError, StoryApiError) as e:
            logger.error(f"Error fetching audio: {e}")
            return None
        return response.json().get("audio")

    async def mark_listened(self, story_id: str) -> None:
        """Best-effort listened flag."""
        try:
            response = await self._client.post(f"/story/{story_id}/listened")
            _raise_for_error(response)
        except (httpx.HTTPError, StoryApiError) as e:
            logger.warning(f"Error updating listen status: {e}")

    async def share(self, story_id: str) -> dict:
        """Share caption and permalink: {"message": ..., "url": ...}."""
        response = await self._client.post(f"/story/{story_id}/share")
        _raise_for_error(response)
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "StoryClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
