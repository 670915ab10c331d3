"""Tests for media status projection."""

import pytest

from storymedia.models import MediaStatus, Story
from storymedia.services.status import project_status, story_media_status


@pytest.mark.parametrize(
    "status, reference, expected",
    [
        (None, None, MediaStatus.PENDING),
        (None, "", MediaStatus.PENDING),
        (None, "pending", MediaStatus.PENDING),
        (None, "processing", MediaStatus.PROCESSING),
        (None, "failed", MediaStatus.FAILED),
        (None, "https://cdn.test/a.mp3", MediaStatus.COMPLETED),
        ("processing", None, MediaStatus.PROCESSING),
        ("completed", "https://cdn.test/a.mp3", MediaStatus.COMPLETED),
        ("failed", None, MediaStatus.FAILED),
        ("pending", None, MediaStatus.PENDING),
    ],
)
def test_project_status(status, reference, expected):
    assert project_status(status, reference) is expected


def test_story_media_status_reports_both_slots():
    story = Story(
        user_id="u", title="t",
        video_status="processing", video_url=None,
        audio_status="completed", audio_url="https://cdn.test/a.mp3",
    )
    assert story_media_status(story) == {"video": "processing", "audio": "completed"}


def test_fresh_story_is_pending():
    assert story_media_status(Story(user_id="u", title="t")) == {"video": "pending", "audio": "pending"}
