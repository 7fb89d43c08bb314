"""Story narration via Gemini text-to-speech."""

import asyncio
import base64
import logging
from typing import Optional

from google import genai

from ...config import GENERATION_TIMEOUT, MODEL_CONSTANTS, get_speech_config

logger = logging.getLogger(__name__)


class Narrator:
    """Synthesize story audio as base64 raw PCM (16-bit LE, mono, 24kHz)."""

    def __init__(self, client: genai.Client, timeout: float = GENERATION_TIMEOUT):
        self.client = client
        self.model = MODEL_CONSTANTS["tts_model"]
        self.config = get_speech_config()
        self.timeout = timeout

    async def synthesize_audio(self, text: str) -> Optional[str]:
        """
        Narrate `text` with the prebuilt storytelling voice.

        Returns:
            Base64-encoded PCM, or None if synthesis failed for any reason
        """
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=text,
                    config=self.config,
                ),
                timeout=self.timeout,
            )
            inline = response.candidates[0].content.parts[0].inline_data
        except Exception as e:
            logger.error(f"Error generating audio: {type(e).__name__}: {e}")
            return None

        if not inline or not inline.data:
            logger.warning("Speech response contained no audio")
            return None

        data = inline.data
        return data if isinstance(data, str) else base64.b64encode(data).decode("ascii")
