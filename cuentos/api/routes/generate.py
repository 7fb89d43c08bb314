"""Story generation endpoint."""

import json
import logging
import time

from fastapi import APIRouter, Request

from ...core.errors import InvalidInput, PolicyRejected, RateLimited, StoryError, UpstreamError
from ..dependencies import Limiter, LogService, Orchestrators
from ..logging import story_logger
from ..models.responses import ErrorResponse, StoryResponse
from ..rate_limit import get_client_ip
from ..validation import check_origin, require_api_key, validate_generation_request

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_json(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidInput() from e


@router.post(
    "/generate-story",
    response_model=StoryResponse,
    summary="Generate an illustrated story",
    description="Write an educational story that explains `concept` through `interest`, "
    "illustrate it with up to 3 images and save it for sharing.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or topic rejected by the model"},
        405: {"model": ErrorResponse},
        429: {"model": ErrorResponse, "description": "Too many requests from this client"},
        500: {"model": ErrorResponse},
    },
)
async def generate_story(
    request: Request,
    limiter: Limiter,
    orchestrators: Orchestrators,
    log_service: LogService,
):
    """Admission control, validation, generation, then best-effort logging."""
    client_ip = get_client_ip(request)
    check_origin(request.headers.get("origin"), client_ip)

    if not limiter.admit(client_ip):
        logger.warning(f"Rate limit exceeded for {client_ip}")
        raise RateLimited()

    api_key = require_api_key()

    try:
        story_request = validate_generation_request(await _read_json(request))
    except InvalidInput as e:
        story_logger.generation_rejected(client_ip, "validation", e)
        raise

    story_logger.generation_started(client_ip, len(story_request.concept))
    start_time = time.time()

    try:
        orchestrator = orchestrators(api_key)
        story = await orchestrator.generate(story_request.concept, story_request.interest)
    except PolicyRejected as e:
        story_logger.generation_rejected(client_ip, "policy", e)
        raise
    except StoryError as e:
        story_logger.generation_failed(client_ip, e)
        raise
    except Exception as e:
        # Never expose internal detail
        story_logger.generation_failed(client_ip, e)
        raise UpstreamError() from e

    story_id = await log_service.log_story(story_request.concept, story_request.interest, story)

    story_logger.generation_completed(client_ip, time.time() - start_time, len(story.images))
    return StoryResponse.from_story(story, story_id)
