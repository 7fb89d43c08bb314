"""Shared story endpoints: permalink, listened flag, narration, share caption."""

import logging

from fastapi import APIRouter, status

from ...config import MODEL_CONSTANTS
from ..dependencies import LogService, Narrators
from ..models.responses import AudioResponse, ErrorResponse, ShareResponse, StoryResponse
from ..services.story_log_service import permalink
from ..validation import require_api_key

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Story not found"}}


@router.get(
    "/{story_id}",
    response_model=StoryResponse,
    summary="Get a shared story",
    description="Resolve a story permalink by rehydrating the saved story.",
    responses={**NOT_FOUND, 503: {"model": ErrorResponse}},
)
async def get_story(story_id: str, log_service: LogService):
    """Get a story by ID."""
    story = await log_service.get_story(story_id)
    return StoryResponse.from_story(story, story_id)


@router.post(
    "/{story_id}/listened",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark a story as listened",
    description="Best-effort: succeeds even if the flag could not be saved.",
)
async def mark_listened(story_id: str, log_service: LogService):
    """Record that narration playback started."""
    if not await log_service.mark_listened(story_id):
        logger.info("Listened flag not updated", extra={"story_id": story_id})


@router.post(
    "/{story_id}/audio",
    response_model=AudioResponse,
    summary="Get story narration",
    description="Returns cached narration when available, otherwise synthesizes and caches it.",
    responses={**NOT_FOUND, 502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def get_story_audio(story_id: str, log_service: LogService, narrators: Narrators):
    """Read-through narration cache for a story."""

    async def synthesize(text: str):
        return await narrators(require_api_key()).synthesize_audio(text)

    audio, cached = await log_service.get_or_create_audio(story_id, synthesize)
    return AudioResponse(
        audio=audio,
        sample_rate=MODEL_CONSTANTS["tts_sample_rate"],
        cached=cached,
    )


@router.post(
    "/{story_id}/share",
    response_model=ShareResponse,
    summary="Get a share message",
    description="One-line caption and permalink for sharing a story.",
    responses={**NOT_FOUND, 503: {"model": ErrorResponse}},
)
async def share_story(story_id: str, log_service: LogService):
    """Craft (or reuse) the share caption for a story."""
    message = await log_service.get_or_create_share_message(story_id)
    return ShareResponse(message=message, url=permalink(story_id))
