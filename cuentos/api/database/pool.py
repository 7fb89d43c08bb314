"""asyncpg pool management.

The pool is created during API startup when DATABASE_URL is set. When it
is absent, story logs are simply not persisted.
"""

from typing import Optional

import asyncpg

from .db import to_asyncpg_dsn

# Global asyncpg pool (set during API startup)
_pool: Optional[asyncpg.Pool] = None


async def create_pool(dsn: str) -> asyncpg.Pool:
    """Create the pool and register it. Called during API startup."""
    pool = await asyncpg.create_pool(to_asyncpg_dsn(dsn), min_size=1, max_size=5)
    set_pool(pool)
    return pool


def set_pool(pool: Optional[asyncpg.Pool]) -> None:
    """Set (or clear) the global pool."""
    global _pool
    _pool = pool


def get_pool() -> Optional[asyncpg.Pool]:
    """Get the asyncpg pool, or None when persistence is not configured."""
    return _pool


async def close_pool() -> None:
    """Close the pool. Called during API shutdown."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
