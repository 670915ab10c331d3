"""Tests for provider selection, credential fallback, memoization and reset."""

import pytest

from storymedia.config import Settings
from storymedia.errors import InvalidMediaTypeError
from storymedia.services.providers.elevenlabs_audio import ElevenLabsAudioProvider
from storymedia.services.providers.openai_audio import OpenAIAudioProvider
from storymedia.services.providers.placeholder import (
    PlaceholderAudioProvider,
    PlaceholderVideoProvider,
)
from storymedia.services.providers.registry import ProviderRegistry
from storymedia.services.providers.runway_video import RunwayVideoProvider


def _registry(storage, **overrides):
    values = {"PLACEHOLDER_DELAY": 0, "VIDEO_PROVIDER": "placeholder", "AUDIO_PROVIDER": "placeholder"}
    values.update(overrides)
    return ProviderRegistry(Settings(**values), storage)


def test_configured_providers_with_credentials(storage):
    registry = _registry(
        storage,
        VIDEO_PROVIDER="runway", RUNWAY_API_KEY="rw",
        AUDIO_PROVIDER="openai", OPENAI_API_KEY="sk",
    )
    assert isinstance(registry.get_video_provider(), RunwayVideoProvider)
    assert isinstance(registry.get_audio_provider(), OpenAIAudioProvider)
    assert registry.get_video_provider().name == "runwayml"


@pytest.mark.parametrize("name", ["elevenlabs", "eleven", "ElevenLabs"])
def test_elevenlabs_aliases(storage, name):
    registry = _registry(storage, AUDIO_PROVIDER=name, ELEVENLABS_API_KEY="xi")
    assert isinstance(registry.get_provider("audio"), ElevenLabsAudioProvider)


def test_missing_credential_falls_back_to_placeholder(storage, caplog):
    registry = _registry(storage, VIDEO_PROVIDER="runwayml", AUDIO_PROVIDER="openai")

    with caplog.at_level("WARNING"):
        video = registry.get_video_provider()
        audio = registry.get_audio_provider()

    assert isinstance(video, PlaceholderVideoProvider)
    assert isinstance(audio, PlaceholderAudioProvider)
    assert "API key not configured" in caplog.text


def test_unknown_provider_uses_placeholder(storage):
    registry = _registry(storage, VIDEO_PROVIDER="sora")
    assert registry.get_video_provider().name == "placeholder"


def test_providers_are_memoized_until_reset(storage):
    registry = _registry(storage, AUDIO_PROVIDER="openai")
    first = registry.get_audio_provider()
    assert registry.get_audio_provider() is first
    assert isinstance(first, PlaceholderAudioProvider)

    # Credential becomes available; only visible after reset
    registry.settings.OPENAI_API_KEY = "sk-new"
    assert registry.get_audio_provider() is first

    registry.reset()
    assert isinstance(registry.get_audio_provider(), OpenAIAudioProvider)


def test_invalid_media_type(storage):
    with pytest.raises(InvalidMediaTypeError):
        _registry(storage).get_provider("image")
