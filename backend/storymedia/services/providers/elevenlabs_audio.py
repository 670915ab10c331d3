"""ElevenLabs text-to-speech provider."""

from __future__ import annotations

import httpx

from storymedia.services.providers.base import GenerationParams
from storymedia.services.providers.tts import ChunkedTTSProvider
from storymedia.services.storage import StorageService

DEFAULT_API_URL = "https://api.elevenlabs.io/v1"
DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"  # Rachel
COST_PER_THOUSAND_CHARS = 0.30


class ElevenLabsAudioProvider(ChunkedTTSProvider):
    display_name = "ElevenLabs"
    max_chunk_length = 5000

    def __init__(
        self,
        api_key: str,
        storage: StorageService,
        *,
        api_url: str = DEFAULT_API_URL,
        voice_id: str = DEFAULT_VOICE_ID,
        model_id: str = "eleven_monolingual_v1",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, storage, http_client=http_client)
        self.api_url = api_url.rstrip("/")
        self.voice_id = voice_id
        self.model_id = model_id

    @property
    def name(self) -> str:
        return "elevenlabs"

    async def _synthesize_chunk(
        self, client: httpx.AsyncClient, chunk: str, params: GenerationParams
    ) -> bytes:
        voice_id = params.voice or self.voice_id
        resp = await client.post(
            f"{self.api_url}/text-to-speech/{voice_id}",
            json={
                "text": chunk,
                "model_id": self.model_id,
                "voice_settings": {
                    "stability": 0.5,
                    "similarity_boost": 0.75,
                    "style": 0.0,
                    "use_speaker_boost": True,
                },
                "speed": params.speed or 1.0,
            },
            headers={
                "Accept": "audio/mpeg",
                "xi-api-key": self.api_key,
                "Content-Type": "application/json",
            },
            timeout=self.request_timeout,
        )
        resp.raise_for_status()
        return resp.content

    def _chunk_cost(self, chunk: str) -> float:
        return len(chunk) / 1000 * COST_PER_THOUSAND_CHARS
