"""StoryMedia — FastAPI application entry point.

Initializes the media service (database + broker) on startup and shuts it
down on exit. A missing broker is not fatal: the app starts in degraded mode.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from storymedia.api.router import api_router
from storymedia.config import get_settings
from storymedia.database import init_db
from storymedia.services.media_service import init_media_service, shutdown_media_service

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: init DB + media service on startup, close on shutdown."""
    logger.info("%s starting up...", settings.APP_NAME)
    logger.info("Providers: video=%s audio=%s", settings.VIDEO_PROVIDER, settings.AUDIO_PROVIDER)

    os.makedirs(settings.MEDIA_VOLUME, exist_ok=True)
    await init_db()
    service = await init_media_service(settings)
    app.state.media_service = service

    yield

    await shutdown_media_service()
    logger.info("%s shut down", settings.APP_NAME)


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Companion video/audio generation for generated stories",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

app.include_router(api_router)

# Locally stored media is served under MEDIA_BASE_URL
os.makedirs(settings.MEDIA_VOLUME, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.MEDIA_VOLUME), name="media")


@app.get("/health")
async def health():
    """Health check, including whether media generation is available."""
    service = getattr(app.state, "media_service", None)
    return {
        "status": "healthy",
        "media_queue": "available" if service is not None and service.available else "unavailable",
    }
