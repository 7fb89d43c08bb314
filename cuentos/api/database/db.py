"""PostgreSQL schema management using SQLAlchemy async."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ..config import DATABASE_URL


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


def to_sqlalchemy_url(dsn: str) -> str:
    """Force the asyncpg driver in a postgres URL."""
    for prefix in ("postgresql+asyncpg://", "postgresql://", "postgres://"):
        if dsn.startswith(prefix):
            return "postgresql+asyncpg://" + dsn[len(prefix):]
    return dsn


def to_asyncpg_dsn(dsn: str) -> str:
    """Convert SQLAlchemy-style URL to asyncpg format."""
    return dsn.replace("+asyncpg", "")


# Engine is only used for schema creation; queries go through the asyncpg pool
engine: Optional[AsyncEngine] = None

if DATABASE_URL:
    engine = create_async_engine(
        to_sqlalchemy_url(DATABASE_URL),
        echo=False,  # Set to True for SQL debugging
        pool_pre_ping=True,
    )


def _check_configured():
    """Raise an error if the database is not configured."""
    if engine is None:
        raise RuntimeError(
            "Database not configured. Set DATABASE_URL environment variable "
            "to a PostgreSQL connection string."
        )


async def init_db() -> None:
    """Initialize database - create all tables."""
    _check_configured()

    from . import models  # noqa: F401  (registers tables on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Release the schema engine's connections."""
    if engine is not None:
        await engine.dispose()
