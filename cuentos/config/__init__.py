"""
Configuration module for the educational story generator.

Re-exports all configuration for convenient access.
"""

from .llm import (
    GENERATION_TIMEOUT,
    MODEL_CONSTANTS,
    get_api_key,
    get_caption_lm,
    get_genai_client,
    get_image_config,
    get_safety_settings,
    get_speech_config,
    get_story_config,
)
from .story import STORY_CONSTANTS, share_caption_fallback

__all__ = [
    # LLM
    "GENERATION_TIMEOUT",
    "MODEL_CONSTANTS",
    "get_api_key",
    "get_caption_lm",
    "get_genai_client",
    "get_image_config",
    "get_safety_settings",
    "get_speech_config",
    "get_story_config",
    # Story
    "STORY_CONSTANTS",
    "share_caption_fallback",
]
