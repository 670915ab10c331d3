"""Placeholder providers — exercise the pipeline without external calls or spend."""

from __future__ import annotations

import asyncio
import logging

from storymedia.services.providers.base import (
    AudioProvider,
    GenerationParams,
    GenerationResult,
    VideoProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://storage.example.com"


class PlaceholderVideoProvider(VideoProvider):
    def __init__(self, delay: float = 2.0, base_url: str = DEFAULT_BASE_URL) -> None:
        self.delay = delay
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "placeholder"

    async def generate(self, params: GenerationParams) -> GenerationResult:
        logger.warning(
            "Using placeholder video provider for story %s - no real video will be generated",
            params.story_id,
        )
        await asyncio.sleep(self.delay)
        return GenerationResult(
            asset_ref=f"{self.base_url}/videos/{params.story_id}.mp4",
            duration=5,
            cost=0.0,
        )


class PlaceholderAudioProvider(AudioProvider):
    def __init__(self, delay: float = 2.0, base_url: str = DEFAULT_BASE_URL) -> None:
        self.delay = delay
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "placeholder"

    async def generate(self, params: GenerationParams) -> GenerationResult:
        logger.warning(
            "Using placeholder audio provider for story %s - no real audio will be generated",
            params.story_id,
        )
        await asyncio.sleep(self.delay)
        return GenerationResult(
            asset_ref=f"{self.base_url}/audio/{params.story_id}.mp3",
            duration=60,
            cost=0.0,
        )
