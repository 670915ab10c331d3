"""OpenAI text-to-speech provider (``/audio/speech``)."""

from __future__ import annotations

import httpx

from storymedia.services.providers.base import GenerationParams
from storymedia.services.providers.tts import ChunkedTTSProvider
from storymedia.services.storage import StorageService

DEFAULT_API_URL = "https://api.openai.com/v1"
COST_PER_MILLION_CHARS = 15.0  # tts-1


class OpenAIAudioProvider(ChunkedTTSProvider):
    display_name = "OpenAI TTS"
    max_chunk_length = 4000

    def __init__(
        self,
        api_key: str,
        storage: StorageService,
        *,
        api_url: str = DEFAULT_API_URL,
        model: str = "tts-1",
        voice: str = "nova",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, storage, http_client=http_client)
        self.api_url = api_url.rstrip("/")
        self.model = model
        self.voice = voice

    @property
    def name(self) -> str:
        return "openai"

    async def _synthesize_chunk(
        self, client: httpx.AsyncClient, chunk: str, params: GenerationParams
    ) -> bytes:
        resp = await client.post(
            f"{self.api_url}/audio/speech",
            json={
                "model": self.model,
                "voice": params.voice or self.voice,
                "input": chunk,
                "speed": params.speed or 1.0,
            },
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.request_timeout,
        )
        resp.raise_for_status()
        return resp.content

    def _chunk_cost(self, chunk: str) -> float:
        return len(chunk) / 1_000_000 * COST_PER_MILLION_CHARS
