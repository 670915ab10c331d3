"""Story ORM model — the media slots of a generated story."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storymedia.database import Base
from storymedia.models.media import MediaType, utcnow


class Story(Base):
    """A generated story with one status/reference pair per media type.

    ``*_status`` holds the lifecycle status (``pending``/``processing``/
    ``completed``/``failed``), ``*_url`` the resolved asset reference once
    completed. ``*_generation`` is bumped on every admission; workers only
    write a slot while their job's generation is still the current one.
    """

    __tablename__ = "stories"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Video slot
    video_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    video_generation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Audio slot
    audio_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    audio_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    audio_generation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


def slot_columns(media_type: MediaType | str) -> tuple[str, str, str]:
    """Return the (status, url, generation) column names for a media type."""
    prefix = MediaType(media_type).value
    return f"{prefix}_status", f"{prefix}_url", f"{prefix}_generation"
