"""Pytest fixtures for unit tests."""

import asyncio
import json
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from google.genai import types

# Keep unit tests off any real database
os.environ["DATABASE_URL"] = ""

from cuentos.api.dependencies import (  # noqa: E402
    get_narrator_factory,
    get_orchestrator_factory,
    get_rate_limiter,
    get_story_log_service,
)
from cuentos.api.main import app  # noqa: E402
from cuentos.api.rate_limit import SlidingWindowRateLimiter  # noqa: E402
from cuentos.api.services.story_log_service import StoryLogService  # noqa: E402
from cuentos.config import MODEL_CONSTANTS  # noqa: E402
from cuentos.core.modules.narrator import Narrator  # noqa: E402
from cuentos.core.modules.story_orchestrator import StoryOrchestrator  # noqa: E402
from cuentos.core.types import GeneratedStory  # noqa: E402


# =============================================================================
# Gemini response builders
# =============================================================================


def text_response(payload) -> types.GenerateContentResponse:
    """A text response whose body is `payload` as JSON (or a raw string)."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=text)]),
                finish_reason=types.FinishReason.STOP,
            )
        ]
    )


def inline_response(data: bytes, mime_type: str) -> types.GenerateContentResponse:
    """A response carrying a single inline-data part (image or audio)."""
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(inline_data=types.Blob(mime_type=mime_type, data=data))],
                ),
                finish_reason=types.FinishReason.STOP,
            )
        ]
    )


def blocked_response() -> types.GenerateContentResponse:
    """A prompt stopped by Gemini's own safety filter."""
    return types.GenerateContentResponse(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(
            block_reason=types.BlockedReason.SAFETY,
        )
    )


def accepted_story(prompts=None) -> dict:
    """Model output for an accepted story."""
    return {
        "outcome": "accepted",
        "title": "Messi y la fotosíntesis",
        "content": "Había una vez una cancha llena de plantas...",
        "moralOrFact": "Las plantas convierten la luz en energía.",
        "imagePrompts": prompts if prompts is not None else ["scene one", "scene two", "scene three"],
    }


@pytest.fixture
def genai():
    """Response builders for fake Gemini clients."""
    return SimpleNamespace(
        text=text_response,
        inline=inline_response,
        blocked=blocked_response,
        accepted_story=accepted_story,
    )


@pytest.fixture
def make_fake_client():
    """
    Build a fake genai.Client routed by model name.

    Args (of the returned factory):
        story: response (or exception) for the text call
        images: {prompt substring: bytes | Exception | ("sleep", seconds, bytes)}
        speech: response (or exception) for the TTS call
    """

    def factory(story=None, images=None, speech=None):
        images = images or {}

        async def generate_content(model, contents, config=None):
            if model == MODEL_CONSTANTS["text_model"]:
                if isinstance(story, Exception):
                    raise story
                return story
            if model == MODEL_CONSTANTS["image_model"]:
                for key, outcome in images.items():
                    if key in contents:
                        if isinstance(outcome, tuple):
                            _, delay, outcome = outcome
                            await asyncio.sleep(delay)
                        if isinstance(outcome, Exception):
                            raise outcome
                        return inline_response(outcome, "image/png")
                raise RuntimeError(f"unexpected image prompt: {contents}")
            if model == MODEL_CONSTANTS["tts_model"]:
                if isinstance(speech, Exception):
                    raise speech
                return speech
            raise AssertionError(f"unexpected model {model}")

        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(side_effect=generate_content)
        return client

    return factory


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def sample_story():
    return GeneratedStory(
        title="Messi y la fotosíntesis",
        content="Había una vez una cancha llena de plantas...",
        moral_or_fact="Las plantas convierten la luz en energía.",
        images=["data:image/png;base64,QQ==", "data:image/png;base64,Qg=="],
    )


@pytest.fixture
def api_key(monkeypatch):
    """Configure a generation credential."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    return "test-gemini-key"


@pytest.fixture
def mock_orchestrator():
    orchestrator = MagicMock(spec=StoryOrchestrator)
    orchestrator.generate = AsyncMock()
    return orchestrator


@pytest.fixture
def mock_narrator():
    narrator = MagicMock(spec=Narrator)
    narrator.synthesize_audio = AsyncMock()
    return narrator


@pytest.fixture
def mock_log_service():
    return AsyncMock(spec=StoryLogService)


@pytest.fixture
def limiter():
    """A fresh limiter per test, driven by a controllable clock."""
    clock = MagicMock(return_value=1000.0)
    return SlidingWindowRateLimiter(max_requests=10, window_seconds=60, clock=clock)


@pytest.fixture
def client_with_mocks(api_key, mock_orchestrator, mock_narrator, mock_log_service, limiter):
    """TestClient with mocked generation, narration, persistence and a fresh limiter.

    Yields (client, orchestrator, log_service, factory_calls) where
    factory_calls records each API key an orchestrator was built with.
    """
    factory_calls = []

    def orchestrator_factory(key):
        factory_calls.append(key)
        return mock_orchestrator

    app.dependency_overrides[get_orchestrator_factory] = lambda: orchestrator_factory
    app.dependency_overrides[get_narrator_factory] = lambda: (lambda key: mock_narrator)
    app.dependency_overrides[get_story_log_service] = lambda: mock_log_service
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    with TestClient(app) as client:
        yield client, mock_orchestrator, mock_log_service, factory_calls

    app.dependency_overrides.clear()
