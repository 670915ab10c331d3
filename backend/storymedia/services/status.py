"""Media status projection — story slot → pending/processing/completed/failed."""

from __future__ import annotations

from storymedia.models.media import SENTINELS, MediaStatus
from storymedia.models.story import Story


def project_status(status: str | None, reference: str | None = None) -> MediaStatus:
    """Project a story media slot onto the four-state status.

    An explicit status column wins. Rows without one fall back to reading the
    reference column the legacy way: empty → pending, a sentinel token → that
    status, anything else is a resolved asset → completed.
    """
    if status:
        return MediaStatus(status)
    if not reference:
        return MediaStatus.PENDING
    if reference in SENTINELS:
        return MediaStatus(reference)
    return MediaStatus.COMPLETED


def story_media_status(story: Story) -> dict[str, str]:
    """Return ``{"video": ..., "audio": ...}`` for a loaded story."""
    return {
        "video": project_status(story.video_status, story.video_url).value,
        "audio": project_status(story.audio_status, story.audio_url).value,
    }
