"""FastAPI dependency injection for services and generation components."""

from typing import Annotated, Callable

from fastapi import Depends, Request

from ..config import get_genai_client
from ..core.modules.narrator import Narrator
from ..core.modules.story_orchestrator import StoryOrchestrator
from .database.pool import get_pool
from .database.repository import StoryLogRepository
from .rate_limit import RateLimiter, SlidingWindowRateLimiter
from .services.story_log_service import StoryLogService

OrchestratorFactory = Callable[[str], StoryOrchestrator]
NarratorFactory = Callable[[str], Narrator]


# Rate limiter - one instance per app, created at startup
def get_rate_limiter(request: Request) -> RateLimiter:
    """Get the app's rate limiter, creating it on first use."""
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        limiter = SlidingWindowRateLimiter()
        request.app.state.rate_limiter = limiter
    return limiter


# Generation components are built per request from the validated API key,
# so the credential check can run after admission control.
def build_orchestrator(api_key: str) -> StoryOrchestrator:
    return StoryOrchestrator(get_genai_client(api_key))


def build_narrator(api_key: str) -> Narrator:
    return Narrator(get_genai_client(api_key))


def get_orchestrator_factory() -> OrchestratorFactory:
    """Get the factory for story orchestrators."""
    return build_orchestrator


def get_narrator_factory() -> NarratorFactory:
    """Get the factory for narrators."""
    return build_narrator


# Repository - None when no database is configured
def get_repository() -> StoryLogRepository | None:
    """Get a StoryLogRepository backed by the global pool."""
    pool = get_pool()
    return StoryLogRepository(pool) if pool is not None else None


# Service - depends on repository
def get_story_log_service(
    repo: Annotated[StoryLogRepository | None, Depends(get_repository)]
) -> StoryLogService:
    """Get a StoryLogService instance with injected repository."""
    return StoryLogService(repo)


# Type aliases for cleaner route signatures
Limiter = Annotated[RateLimiter, Depends(get_rate_limiter)]
Orchestrators = Annotated[OrchestratorFactory, Depends(get_orchestrator_factory)]
Narrators = Annotated[NarratorFactory, Depends(get_narrator_factory)]
LogService = Annotated[StoryLogService, Depends(get_story_log_service)]
