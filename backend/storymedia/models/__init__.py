"""ORM model package — registers all models with Base.metadata."""

from storymedia.models.media import SENTINELS, MediaStatus, MediaType
from storymedia.models.media_cost import QUOTA_STATUSES, CostStatus, MediaGenerationCost
from storymedia.models.story import Story, slot_columns

__all__ = [
    "SENTINELS",
    "MediaStatus",
    "MediaType",
    "QUOTA_STATUSES",
    "CostStatus",
    "MediaGenerationCost",
    "Story",
    "slot_columns",
]
