"""MediaGenerationCost ORM model — one append-only row per job attempt."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from storymedia.database import Base
from storymedia.models.media import utcnow


class CostStatus(str, enum.Enum):
    """Cost record statuses."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Statuses that consume monthly quota (a failed attempt does not).
QUOTA_STATUSES = (
    CostStatus.PENDING.value,
    CostStatus.PROCESSING.value,
    CostStatus.COMPLETED.value,
)


class MediaGenerationCost(Base):
    """Provider, cost and outcome of a single generation attempt."""

    __tablename__ = "media_generation_costs"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    story_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    media_type: Mapped[str] = mapped_column(String(10), nullable=False)
    provider: Mapped[str] = mapped_column(String(50), nullable=False, default="unknown")
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CostStatus.PROCESSING.value
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
