"""
Generative model configuration for the educational story generator.

All model access goes through Gemini:
- google-genai client: structured story text, illustrations, narration
- dspy LM: short free-text helpers (share captions)

Every upstream call is bounded by GENERATION_TIMEOUT seconds.
"""

import os

import dspy
from dotenv import load_dotenv
from google import genai
from google.genai import types

# Load environment variables from .env file
load_dotenv()

API_KEY_ENV = "GEMINI_API_KEY"

# Timeout for a single upstream call (seconds)
GENERATION_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "120"))

MODEL_CONSTANTS = {
    "text_model": "gemini-2.5-flash",
    "image_model": "gemini-2.5-flash-image",
    "tts_model": "gemini-2.5-flash-preview-tts",
    "tts_voice": "Puck",  # Warm storytelling timbre
    "tts_sample_rate": 24000,
}

# Content-safety thresholds applied to both text and image generation
SAFETY_THRESHOLDS = {
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH: types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: types.HarmBlockThreshold.BLOCK_LOW_AND_ABOVE,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    types.HarmCategory.HARM_CATEGORY_HARASSMENT: types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}


def get_api_key() -> str | None:
    """Return the generation credential, or None when it is not configured."""
    return os.getenv(API_KEY_ENV) or None


def get_genai_client(api_key: str | None = None) -> genai.Client:
    """
    Get the Gemini client used for story text, images and narration.

    Uses GEMINI_API_KEY from environment unless a key is passed explicitly.
    """
    api_key = api_key or get_api_key()
    if not api_key:
        raise ValueError(f"{API_KEY_ENV} not found in environment. Set it in .env file.")

    return genai.Client(api_key=api_key)


def get_safety_settings() -> list[types.SafetySetting]:
    """Safety settings shared by every content-producing call."""
    return [
        types.SafetySetting(category=category, threshold=threshold)
        for category, threshold in SAFETY_THRESHOLDS.items()
    ]


def get_story_config(response_schema: dict) -> types.GenerateContentConfig:
    """Config for the structured story text call."""
    return types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=response_schema,
        safety_settings=get_safety_settings(),
    )


def get_image_config() -> types.GenerateContentConfig:
    """Config for a single illustration call."""
    return types.GenerateContentConfig(
        response_modalities=[types.Modality.TEXT, types.Modality.IMAGE],
        safety_settings=get_safety_settings(),
    )


def get_speech_config() -> types.GenerateContentConfig:
    """Config for narration (raw 24kHz PCM from a prebuilt voice)."""
    return types.GenerateContentConfig(
        response_modalities=[types.Modality.AUDIO],
        speech_config=types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(
                    voice_name=MODEL_CONSTANTS["tts_voice"],
                )
            )
        ),
    )


def get_caption_lm() -> dspy.LM:
    """
    Get the LM for short share captions.

    Small token budget; captions are a single line.
    """
    api_key = get_api_key()
    if not api_key:
        raise ValueError(f"{API_KEY_ENV} not found in environment. Set it in .env file.")

    return dspy.LM(
        f"gemini/{MODEL_CONSTANTS['text_model']}",
        api_key=api_key,
        max_tokens=256,
        temperature=0.7,
        timeout=GENERATION_TIMEOUT,
    )
