"""Input validation for story generation requests.

Every check here runs before any upstream call is made.
"""

import logging
from typing import Any

from pydantic import ValidationError

from ..config import STORY_CONSTANTS, get_api_key
from ..core.errors import InvalidInput, Unconfigured
from ..core.types import GenerationRequest
from .config import ALLOWED_ORIGINS

logger = logging.getLogger(__name__)


def require_api_key() -> str:
    """Return the generation credential.

    Raises:
        Unconfigured: If GEMINI_API_KEY is not set
    """
    api_key = get_api_key()
    if not api_key:
        logger.error("GEMINI_API_KEY not configured")
        raise Unconfigured()
    return api_key


def validate_generation_request(payload: Any) -> GenerationRequest:
    """Validate a raw JSON body into a GenerationRequest.

    Raises:
        InvalidInput: If the body is not an object, or concept/interest is
            missing, not a string, empty, or too long
    """
    if not isinstance(payload, dict):
        raise InvalidInput()

    try:
        return GenerationRequest.model_validate(
            {"concept": payload.get("concept"), "interest": payload.get("interest")}
        )
    except ValidationError as e:
        too_long = any(err["type"] == "string_too_long" for err in e.errors())
        if too_long:
            raise InvalidInput(
                f"fields must be at most {STORY_CONSTANTS['max_field_length']} characters"
            ) from e
        raise InvalidInput() from e


def check_origin(origin: str | None, client_ip: str) -> bool:
    """Log requests from unexpected origins. Never blocks."""
    if origin and origin not in ALLOWED_ORIGINS:
        logger.warning(f"Request from unauthorized origin: {origin} (IP: {client_ip})")
        return False
    return True
