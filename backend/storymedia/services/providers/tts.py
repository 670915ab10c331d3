"""Chunked text-to-speech base — shared by the OpenAI and ElevenLabs adapters.

TTS APIs cap the characters per request, so the story is stripped of HTML,
split on sentence boundaries, synthesized one chunk at a time, and the
resulting MP3 buffers are concatenated in order before upload.
"""

from __future__ import annotations

import logging
from abc import abstractmethod

import httpx

from storymedia.errors import MediaError, ProviderConfigurationError, ProviderError
from storymedia.services.providers.base import AudioProvider, GenerationParams, GenerationResult
from storymedia.services.providers.text import estimate_duration, split_into_chunks, strip_html
from storymedia.services.storage import StorageService

logger = logging.getLogger(__name__)


class ChunkedTTSProvider(AudioProvider):
    """Audio adapter that synthesizes sequential chunks under a character ceiling."""

    display_name: str = "TTS"
    max_chunk_length: int = 4000
    request_timeout: float = 120.0

    def __init__(
        self,
        api_key: str,
        storage: StorageService,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ProviderConfigurationError(f"{self.display_name} API key not configured")
        self.api_key = api_key
        self.storage = storage
        self._http_client = http_client

    @abstractmethod
    async def _synthesize_chunk(
        self, client: httpx.AsyncClient, chunk: str, params: GenerationParams
    ) -> bytes:
        """Call the provider for one chunk and return the audio bytes."""

    @abstractmethod
    def _chunk_cost(self, chunk: str) -> float:
        ...

    async def generate(self, params: GenerationParams) -> GenerationResult:
        logger.info("Starting %s audio generation for story %s", self.display_name, params.story_id)

        clean_content = strip_html(params.content)
        chunks = split_into_chunks(clean_content, self.max_chunk_length)
        if not chunks:
            raise ProviderError(
                f"{self.display_name} audio generation failed: story has no text to narrate",
                retriable=False,
            )

        client = self._http_client or httpx.AsyncClient(timeout=self.request_timeout)
        own_client = self._http_client is None

        audio_buffers: list[bytes] = []
        total_cost = 0.0
        try:
            for i, chunk in enumerate(chunks):
                logger.debug(
                    "%s chunk %d/%d (%d chars) for story %s",
                    self.display_name, i + 1, len(chunks), len(chunk), params.story_id,
                )
                audio_buffers.append(await self._synthesize_chunk(client, chunk, params))
                total_cost += self._chunk_cost(chunk)
        except MediaError:
            raise
        except httpx.HTTPError as e:
            logger.error(
                "%s audio generation failed for story %s: %s",
                self.display_name, params.story_id, e,
            )
            raise ProviderError(f"{self.display_name} audio generation failed: {e}") from e
        finally:
            if own_client:
                await client.aclose()

        upload = await self.storage.upload_file(
            b"".join(audio_buffers), f"{params.story_id}.mp3", "audio/mpeg", "system"
        )

        logger.info(
            "%s audio generation completed for story %s (%d chunks)",
            self.display_name, params.story_id, len(chunks),
        )
        return GenerationResult(
            asset_ref=upload.url,
            duration=estimate_duration(clean_content),
            cost=total_cost,
        )
