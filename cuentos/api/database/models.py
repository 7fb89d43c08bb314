"""SQLAlchemy ORM models for PostgreSQL."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class StoryLog(Base):
    """One generated story, kept for permalinks and narration caching."""

    __tablename__ = "story_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    concept: Mapped[str] = mapped_column(Text, nullable=False)
    interests: Mapped[str] = mapped_column(Text, nullable=False)
    story_content: Mapped[str] = mapped_column(Text, nullable=False)  # JSON GeneratedStory
    listened: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    audio_data: Mapped[Optional[str]] = mapped_column(Text)  # base64 PCM, filled on first narration
    share_message: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("idx_story_logs_created_at", "created_at"),
    )
