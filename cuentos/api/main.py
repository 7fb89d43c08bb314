"""FastAPI application for the educational story generator."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import StoryError, UpstreamError
from .config import DATABASE_URL
from .rate_limit import SlidingWindowRateLimiter
from .routes import generate, stories

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    app.state.rate_limiter = SlidingWindowRateLimiter()

    # Startup: Initialize database (only if DATABASE_URL is configured)
    if DATABASE_URL:
        from .database import close_pool, create_pool, dispose_engine, init_db

        try:
            await init_db()
            await create_pool(DATABASE_URL)
            logger.info("Database initialized")
        except Exception as e:
            # Stories are still generated, just not saved
            logger.error(f"Database unavailable, story logging disabled: {e}")
    else:
        logger.warning("DATABASE_URL not set - story logging disabled")

    yield

    # Shutdown: release database connections
    if DATABASE_URL:
        await close_pool()
        await dispose_engine()


app = FastAPI(
    title="Educational Story Generator API",
    description="""
Turn a learning concept into an illustrated short story framed by the student's interests.

## Features
- **Story**: a 500+ word story in Rioplatense Spanish explaining the concept
- **Illustrations**: up to 3 generated images per story
- **Sharing**: every story gets a permalink, a share caption and on-demand narration

## Workflow
1. POST `/api/generate-story` with `concept` and `interest`
2. Share `/story/{id}`; POST `/story/{id}/audio` to narrate it
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend (origins are logged, not enforced)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoryError)
async def story_error_handler(request: Request, exc: StoryError):
    """Render domain errors as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Keep routing errors (404, 405) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail).lower()},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Anything else is a generic 500; detail goes to the logs only."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": UpstreamError.default_message})


# Include routers
app.include_router(generate.router, prefix="/api", tags=["Generation"])
app.include_router(stories.router, prefix="/story", tags=["Stories"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
