"""Provider interface shared by all video/audio adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class GenerationParams:
    """Input for a single media generation call."""

    story_id: str
    content: str
    title: str
    theme: str | None = None
    voice: str | None = None
    speed: float | None = None


@dataclass
class GenerationResult:
    """Resolved asset reference plus duration (seconds) and cost (USD)."""

    asset_ref: str
    duration: float | None = None
    cost: float = 0.0


class MediaProvider(ABC):
    """Narrow adapter interface: ``generate(params) -> GenerationResult``.

    Adapters must not touch the database; persisting the outcome is the
    worker's job.
    """

    media_type: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable identifier used for logging and cost attribution."""

    @abstractmethod
    async def generate(self, params: GenerationParams) -> GenerationResult:
        ...


class VideoProvider(MediaProvider):
    media_type = "video"


class AudioProvider(MediaProvider):
    media_type = "audio"
