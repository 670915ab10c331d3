"""Application configuration using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """StoryMedia settings.

    Loaded from environment variables or .env file.
    """

    # --- Application ---
    APP_NAME: str = "StoryMedia"
    DEBUG: bool = False

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./storymedia.db"

    # --- Redis / Celery broker ---
    REDIS_URL: str = "redis://localhost:6379/0"
    BROKER_CONNECT_TIMEOUT: float = 3.0

    # --- Media queue ---
    MEDIA_QUEUE_NAME: str = "media-generation"
    MEDIA_WORKER_CONCURRENCY: int = 2
    MEDIA_JOB_ATTEMPTS: int = 3
    MEDIA_JOB_BACKOFF: float = 2.0  # seconds, doubled per retry

    # --- Provider selection ---
    VIDEO_PROVIDER: str = "placeholder"  # runway | runwayml | placeholder
    AUDIO_PROVIDER: str = "openai"  # openai | elevenlabs | eleven | placeholder

    # --- RunwayML (video) ---
    RUNWAY_API_KEY: str = ""
    RUNWAY_API_URL: str = "https://api.runwayml.com/v1"

    # --- OpenAI TTS (audio) ---
    OPENAI_API_KEY: str = ""
    OPENAI_API_URL: str = "https://api.openai.com/v1"
    OPENAI_TTS_MODEL: str = "tts-1"
    OPENAI_TTS_VOICE: str = "nova"

    # --- ElevenLabs (audio) ---
    ELEVENLABS_API_KEY: str = ""
    ELEVENLABS_API_URL: str = "https://api.elevenlabs.io/v1"
    ELEVENLABS_VOICE_ID: str = "21m00Tcm4TlvDq8ikWAM"  # Rachel
    ELEVENLABS_MODEL: str = "eleven_monolingual_v1"

    # --- Placeholder providers ---
    PLACEHOLDER_DELAY: float = 2.0
    PLACEHOLDER_BASE_URL: str = "https://storage.example.com"

    # --- Media Volume (first-party object storage) ---
    MEDIA_VOLUME: str = "media_volume"
    MEDIA_BASE_URL: str = "/media"

    # --- Monthly quotas ---
    VIDEO_MONTHLY_LIMIT: int = 10
    AUDIO_MONTHLY_LIMIT: int = 20

    def monthly_limit(self, media_type: str) -> int:
        """Return the monthly generation ceiling for a media type."""
        return {
            "video": self.VIDEO_MONTHLY_LIMIT,
            "audio": self.AUDIO_MONTHLY_LIMIT,
        }[media_type]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
