"""Video/audio provider implementations.

Video providers follow the async generation pattern:
  POST create task → poll status → download → re-upload to media storage
Audio providers synthesize sentence-bounded chunks and upload the joined MP3.
"""

from storymedia.services.providers.base import (
    AudioProvider,
    GenerationParams,
    GenerationResult,
    MediaProvider,
    VideoProvider,
)
from storymedia.services.providers.registry import (
    ProviderRegistry,
    get_audio_provider,
    get_provider_registry,
    get_video_provider,
    reset_providers,
)

__all__ = [
    "AudioProvider",
    "GenerationParams",
    "GenerationResult",
    "MediaProvider",
    "VideoProvider",
    "ProviderRegistry",
    "get_audio_provider",
    "get_provider_registry",
    "get_video_provider",
    "reset_providers",
]
