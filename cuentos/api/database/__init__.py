"""Database module for story log persistence."""

from .db import init_db, dispose_engine, engine, Base
from .models import StoryLog
from .pool import create_pool, close_pool, get_pool, set_pool
from .repository import StoryLogRepository

__all__ = [
    # Schema management
    "init_db",
    "dispose_engine",
    "engine",
    "Base",
    # Models
    "StoryLog",
    # Connection pool
    "create_pool",
    "close_pool",
    "get_pool",
    "set_pool",
    # Repositories
    "StoryLogRepository",
]
