"""Provider registry — resolves the configured adapter per media type.

Usage:
    from storymedia.services.providers.registry import get_provider_registry
    provider = get_provider_registry().get_provider("audio")

Adapters are memoized for the registry's lifetime. A configured provider
whose credential is missing is replaced by the placeholder (with a warning)
so media generation stays available; ``reset()`` drops memoized instances so
credential changes are picked up.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

import httpx

from storymedia.config import Settings, get_settings
from storymedia.errors import InvalidMediaTypeError, ProviderConfigurationError
from storymedia.models.media import MediaType
from storymedia.services.providers.base import AudioProvider, MediaProvider, VideoProvider
from storymedia.services.providers.elevenlabs_audio import ElevenLabsAudioProvider
from storymedia.services.providers.openai_audio import OpenAIAudioProvider
from storymedia.services.providers.placeholder import (
    PlaceholderAudioProvider,
    PlaceholderVideoProvider,
)
from storymedia.services.providers.runway_video import RunwayVideoProvider
from storymedia.services.storage import StorageService, get_storage_service

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Settings, StorageService, Optional[httpx.AsyncClient]], MediaProvider]

# Configuration aliases → canonical provider name
_ALIASES = {
    "runway": "runwayml",
    "eleven": "elevenlabs",
}


def _runway(settings: Settings, storage: StorageService, client: httpx.AsyncClient | None) -> MediaProvider:
    return RunwayVideoProvider(
        settings.RUNWAY_API_KEY, storage,
        api_url=settings.RUNWAY_API_URL, http_client=client,
    )


def _openai(settings: Settings, storage: StorageService, client: httpx.AsyncClient | None) -> MediaProvider:
    return OpenAIAudioProvider(
        settings.OPENAI_API_KEY, storage,
        api_url=settings.OPENAI_API_URL,
        model=settings.OPENAI_TTS_MODEL,
        voice=settings.OPENAI_TTS_VOICE,
        http_client=client,
    )


def _elevenlabs(settings: Settings, storage: StorageService, client: httpx.AsyncClient | None) -> MediaProvider:
    return ElevenLabsAudioProvider(
        settings.ELEVENLABS_API_KEY, storage,
        api_url=settings.ELEVENLABS_API_URL,
        voice_id=settings.ELEVENLABS_VOICE_ID,
        model_id=settings.ELEVENLABS_MODEL,
        http_client=client,
    )


# Closed variant set per media type
PROVIDER_FACTORIES: dict[MediaType, dict[str, ProviderFactory]] = {
    MediaType.VIDEO: {"runwayml": _runway},
    MediaType.AUDIO: {"openai": _openai, "elevenlabs": _elevenlabs},
}


class ProviderRegistry:
    """Memoized provider lookup keyed by media type."""

    def __init__(
        self,
        settings: Settings | None = None,
        storage: StorageService | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._storage = storage
        self._http_client = http_client
        self._providers: dict[MediaType, MediaProvider] = {}

    @property
    def storage(self) -> StorageService:
        if self._storage is None:
            self._storage = get_storage_service(self.settings)
        return self._storage

    def get_provider(self, media_type: MediaType | str) -> MediaProvider:
        try:
            media_type = MediaType(media_type)
        except ValueError:
            raise InvalidMediaTypeError(str(media_type)) from None

        provider = self._providers.get(media_type)
        if provider is None:
            provider = self._build(media_type)
            self._providers[media_type] = provider
        return provider

    def get_video_provider(self) -> VideoProvider:
        return self.get_provider(MediaType.VIDEO)  # type: ignore[return-value]

    def get_audio_provider(self) -> AudioProvider:
        return self.get_provider(MediaType.AUDIO)  # type: ignore[return-value]

    def reset(self) -> None:
        """Forget memoized providers."""
        self._providers.clear()

    def _configured_name(self, media_type: MediaType) -> str:
        raw = self.settings.VIDEO_PROVIDER if media_type is MediaType.VIDEO else self.settings.AUDIO_PROVIDER
        name = (raw or "placeholder").strip().lower()
        return _ALIASES.get(name, name)

    def _build(self, media_type: MediaType) -> MediaProvider:
        name = self._configured_name(media_type)
        factory = PROVIDER_FACTORIES[media_type].get(name)

        if factory is None:
            if name != "placeholder":
                logger.warning("Unknown %s provider %r, using placeholder", media_type.value, name)
            logger.info("Using placeholder %s provider", media_type.value)
            return self._placeholder(media_type)

        try:
            provider = factory(self.settings, self.storage, self._http_client)
        except ProviderConfigurationError as e:
            logger.warning("%s; using placeholder %s provider", e, media_type.value)
            return self._placeholder(media_type)

        logger.info("Using %s %s provider", provider.name, media_type.value)
        return provider

    def _placeholder(self, media_type: MediaType) -> MediaProvider:
        cls = PlaceholderVideoProvider if media_type is MediaType.VIDEO else PlaceholderAudioProvider
        return cls(
            delay=self.settings.PLACEHOLDER_DELAY,
            base_url=self.settings.PLACEHOLDER_BASE_URL,
        )


_registry: ProviderRegistry | None = None


def get_provider_registry(settings: Settings | None = None) -> ProviderRegistry:
    """Return the process-wide registry, creating it from settings on first use."""
    global _registry
    if _registry is None:
        _registry = ProviderRegistry(settings)
    return _registry


def get_video_provider() -> VideoProvider:
    return get_provider_registry().get_video_provider()


def get_audio_provider() -> AudioProvider:
    return get_provider_registry().get_audio_provider()


def reset_providers() -> None:
    """Clear memoized providers on the process-wide registry."""
    if _registry is not None:
        _registry.reset()
