"""RunwayML video generation provider.

Async task pattern:
1. POST /generations → create task, returns generation id
2. GET  /generations/{id} → poll status every 5s (60 polls, 5 minute ceiling)
3. Download the result and re-upload it to first-party storage
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from storymedia.errors import (
    MediaError,
    ProviderConfigurationError,
    ProviderError,
    ProviderGenerationFailedError,
    ProviderTimeoutError,
)
from storymedia.services.providers.base import GenerationParams, GenerationResult, VideoProvider
from storymedia.services.providers.text import content_preview
from storymedia.services.storage import StorageService

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.runwayml.com/v1"
VIDEO_MODEL = "gen2"
VIDEO_DURATION = 5  # seconds
ASPECT_RATIO = "16:9"
COST_PER_SECOND = 0.05


class RunwayVideoProvider(VideoProvider):
    """Poll-based text-to-video adapter for RunwayML."""

    def __init__(
        self,
        api_key: str,
        storage: StorageService,
        *,
        api_url: str = DEFAULT_API_URL,
        http_client: httpx.AsyncClient | None = None,
        poll_interval: float = 5.0,
        max_poll_attempts: int = 60,
    ) -> None:
        if not api_key:
            raise ProviderConfigurationError("RunwayML API key not configured")
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.storage = storage
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self._http_client = http_client

    @property
    def name(self) -> str:
        return "runwayml"

    async def generate(self, params: GenerationParams) -> GenerationResult:
        logger.info("Starting RunwayML video generation for story %s", params.story_id)

        client = self._http_client or httpx.AsyncClient(timeout=300.0)
        own_client = self._http_client is None
        try:
            generation_id = await self._create_task(client, params)
            video_url = await self._poll(client, generation_id)

            # Download and re-host: third-party URLs may be short-lived
            video_resp = await client.get(video_url)
            video_resp.raise_for_status()
            upload = await self.storage.upload_file(
                video_resp.content, f"{params.story_id}.mp4", "video/mp4", "system"
            )
        except MediaError:
            raise
        except httpx.HTTPError as e:
            logger.error("RunwayML request failed for story %s: %s", params.story_id, e)
            raise ProviderError(f"RunwayML request failed: {e}") from e
        finally:
            if own_client:
                await client.aclose()

        logger.info("RunwayML video generation completed for story %s", params.story_id)
        return GenerationResult(
            asset_ref=upload.url,
            duration=VIDEO_DURATION,
            cost=COST_PER_SECOND * VIDEO_DURATION,
        )

    def build_prompt(self, params: GenerationParams) -> str:
        """Create a visual prompt from the theme and a short content preview."""
        theme = params.theme or "calming"
        preview = content_preview(params.content, 500)
        return (
            f"A {theme} themed video scene: {preview}. Calming, peaceful, "
            "sleep-inducing visuals with soft lighting and gentle movement."
        )

    async def _create_task(self, client: httpx.AsyncClient, params: GenerationParams) -> str:
        body: dict[str, Any] = {
            "model": VIDEO_MODEL,
            "prompt": self.build_prompt(params),
            "duration": VIDEO_DURATION,
            "aspectRatio": ASPECT_RATIO,
        }
        resp = await client.post(
            f"{self.api_url}/generations",
            json=body,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )
        resp.raise_for_status()

        generation_id = resp.json().get("id")
        if not generation_id:
            raise ProviderError("RunwayML task creation failed: no generation id returned")

        logger.info("RunwayML task created: %s (story=%s)", generation_id, params.story_id)
        return generation_id

    async def _poll(self, client: httpx.AsyncClient, generation_id: str) -> str:
        """Poll until the task completes; return the remote video URL."""
        for attempt in range(self.max_poll_attempts):
            await asyncio.sleep(self.poll_interval)

            resp = await client.get(
                f"{self.api_url}/generations/{generation_id}",
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            resp.raise_for_status()
            data = resp.json()
            status = data.get("status")

            if status == "completed":
                output = data.get("output") or []
                if not output:
                    raise ProviderError("RunwayML task completed but no video URL")
                return output[0]

            if status == "failed":
                raise ProviderGenerationFailedError("RunwayML video generation failed")

            logger.debug(
                "RunwayML task %s: %s (poll %d/%d)",
                generation_id, status, attempt + 1, self.max_poll_attempts,
            )

        raise ProviderTimeoutError("RunwayML video generation timed out")
