"""Media type / status enums shared by the story and cost models."""

from __future__ import annotations

import enum
from datetime import datetime, timezone


class MediaType(str, enum.Enum):
    """Companion media kinds generated for a story."""

    VIDEO = "video"
    AUDIO = "audio"


class MediaStatus(str, enum.Enum):
    """Projected lifecycle status of a story's media slot."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Values that mark a slot as "in flight / failed" rather than a real asset.
SENTINELS = frozenset({
    MediaStatus.PENDING.value,
    MediaStatus.PROCESSING.value,
    MediaStatus.FAILED.value,
})


def utcnow() -> datetime:
    """Naive UTC timestamp used for all persisted datetimes."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
