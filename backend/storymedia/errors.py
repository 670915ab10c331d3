"""Media pipeline exceptions.

Every error carries an HTTP-ish ``status_code`` for the request layer and a
``retriable`` flag the worker uses to decide whether the broker should
schedule another attempt.
"""

from __future__ import annotations


class MediaError(Exception):
    """Structured media error with status code and retriable flag."""

    status_code: int = 500
    retriable: bool = False

    def __init__(self, message: str, status_code: int | None = None, retriable: bool | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if retriable is not None:
            self.retriable = retriable


class ProviderConfigurationError(MediaError):
    """A provider was selected but its credential is missing."""

    status_code = 500
    retriable = False


class ProviderError(MediaError):
    """Transient provider failure (network, HTTP error, bad payload)."""

    status_code = 502
    retriable = True


class ProviderGenerationFailedError(ProviderError):
    """The remote service explicitly reported the generation as failed."""


class ProviderTimeoutError(ProviderError):
    """The remote service did not finish within the polling budget."""

    status_code = 504


class MediaLimitExceededError(MediaError):
    """The user reached the monthly ceiling for a media type."""

    status_code = 429

    def __init__(self, media_type: str, count: int, limit: int):
        super().__init__(
            f"You have reached your monthly limit of {limit} {media_type} generations. "
            "Please try again next month."
        )
        self.media_type = media_type
        self.count = count
        self.limit = limit


class StoryNotFoundError(MediaError):
    status_code = 404

    def __init__(self, story_id: str | None = None):
        super().__init__("Story not found")
        self.story_id = story_id


class InvalidMediaTypeError(MediaError):
    status_code = 400

    def __init__(self, media_type: str):
        super().__init__(f"Invalid media type: {media_type!r} (expected 'video' or 'audio')")
        self.media_type = media_type
