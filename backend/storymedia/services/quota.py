"""Monthly media generation quota.

Counts a user's cost records for a media type created since the first
instant of the current calendar month (UTC). Pending, processing and
completed attempts count; failed ones do not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storymedia.config import Settings, get_settings
from storymedia.errors import InvalidMediaTypeError, MediaLimitExceededError
from storymedia.models.media import MediaType, utcnow
from storymedia.models.media_cost import QUOTA_STATUSES, MediaGenerationCost

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaSnapshot:
    count: int
    limit: int
    remaining: int

    def to_dict(self) -> dict[str, int]:
        return {"count": self.count, "limit": self.limit, "remaining": self.remaining}


def month_start(now: datetime | None = None) -> datetime:
    """First instant of the calendar month containing ``now``."""
    now = now or utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _media_type(media_type: MediaType | str) -> MediaType:
    try:
        return MediaType(media_type)
    except ValueError:
        raise InvalidMediaTypeError(str(media_type)) from None


async def count_usage(
    session: AsyncSession,
    user_id: str,
    media_type: MediaType | str,
    now: datetime | None = None,
) -> int:
    """Count this month's quota-consuming attempts for a user and media type."""
    mt = _media_type(media_type)
    result = await session.execute(
        select(func.count(MediaGenerationCost.id)).where(
            MediaGenerationCost.user_id == user_id,
            MediaGenerationCost.media_type == mt.value,
            MediaGenerationCost.created_at >= month_start(now),
            MediaGenerationCost.status.in_(QUOTA_STATUSES),
        )
    )
    return int(result.scalar_one())


async def get_media_usage(
    session: AsyncSession,
    user_id: str,
    media_type: MediaType | str,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> QuotaSnapshot:
    """Return ``{count, limit, remaining}`` for the current month."""
    settings = settings or get_settings()
    mt = _media_type(media_type)
    count = await count_usage(session, user_id, mt, now)
    limit = settings.monthly_limit(mt.value)
    return QuotaSnapshot(count=count, limit=limit, remaining=max(0, limit - count))


async def check_media_limits(
    session: AsyncSession,
    user_id: str,
    media_type: MediaType | str,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> QuotaSnapshot:
    """Reject admission when the user is at or over the monthly ceiling.

    Raises:
        MediaLimitExceededError: ``count >= limit``.
    """
    usage = await get_media_usage(session, user_id, media_type, settings=settings, now=now)
    mt = _media_type(media_type).value

    if usage.count >= usage.limit:
        logger.warning(
            "User %s exceeded %s generation limit (count=%d, limit=%d)",
            user_id, mt, usage.count, usage.limit,
        )
        raise MediaLimitExceededError(mt, usage.count, usage.limit)

    logger.info(
        "Media limit check passed for user %s: %s %d/%d (remaining %d)",
        user_id, mt, usage.count, usage.limit, usage.remaining,
    )
    return usage
