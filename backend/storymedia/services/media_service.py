"""Media service — admission, status and usage entry points for the request layer.

All process-wide state (database, provider registry, broker queue) lives on
a ``MediaService`` built by ``init_media_service()`` and torn down by
``shutdown_media_service()``. When the broker is unreachable at startup the
service runs in degraded mode: admission still marks the story slot pending,
but nothing is enqueued and no worker will advance it.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update

from storymedia.config import Settings, get_settings
from storymedia.database import Database, close_db
from storymedia.errors import InvalidMediaTypeError, StoryNotFoundError
from storymedia.models.media import MediaStatus, MediaType
from storymedia.models.story import Story, slot_columns
from storymedia.services import quota
from storymedia.services.media_queue import MediaQueue, QueueCounts, connect_broker
from storymedia.services.pipeline import MediaJob, MediaPipeline, set_media_slot
from storymedia.services.providers.registry import ProviderRegistry
from storymedia.services.quota import QuotaSnapshot
from storymedia.services.status import story_media_status

logger = logging.getLogger(__name__)


def _media_type(media_type: MediaType | str) -> MediaType:
    try:
        return MediaType(media_type)
    except ValueError:
        raise InvalidMediaTypeError(str(media_type)) from None


class MediaService:
    """Explicitly constructed media generation context."""

    def __init__(
        self,
        database: Database,
        registry: ProviderRegistry | None = None,
        queue: MediaQueue | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.database = database
        self.registry = registry or ProviderRegistry(self.settings)
        self.queue = queue
        self.pipeline = MediaPipeline(database.session_factory, self.registry)

    @property
    def available(self) -> bool:
        """True when jobs can be handed to a broker."""
        return self.queue is not None

    # ──────── Admission ────────

    async def queue_media_generation(
        self,
        story_id: str,
        media_type: MediaType | str,
        content: str,
        title: str,
        theme: str | None = None,
        *,
        check_limits: bool = False,
    ) -> None:
        """Admit a media job; the slot reads ``pending`` once this returns."""
        mt = _media_type(media_type)
        status_col, url_col, gen_col = slot_columns(mt)

        async with self.database.session_factory() as session:
            story = (
                await session.execute(select(Story).where(Story.id == story_id))
            ).scalar_one_or_none()
            if story is None:
                raise StoryNotFoundError(story_id)

            if check_limits:
                await quota.check_media_limits(session, story.user_id, mt, settings=self.settings)

            # New generation: older in-flight jobs for this slot stop writing
            await session.execute(
                update(Story)
                .where(Story.id == story_id)
                .values({
                    gen_col: getattr(Story, gen_col) + 1,
                    status_col: MediaStatus.PENDING.value,
                    url_col: None,
                })
            )
            generation = (
                await session.execute(select(getattr(Story, gen_col)).where(Story.id == story_id))
            ).scalar_one()
            await session.commit()

        if self.queue is None:
            logger.warning(
                "Media queue not available (Redis not connected), skipping %s generation for story %s",
                mt.value, story_id,
            )
            return

        job = MediaJob(
            story_id=story_id,
            media_type=mt.value,
            content=content,
            title=title,
            theme=theme,
            generation=generation,
        )
        try:
            self.queue.add(job)
        except Exception as e:
            logger.error("Failed to queue %s generation for story %s: %s", mt.value, story_id, e)
            async with self.database.session_factory() as session:
                await set_media_slot(session, story_id, mt, MediaStatus.FAILED, generation=generation)
                await session.commit()
            raise

    async def regenerate_media(
        self,
        story_id: str,
        media_type: MediaType | str,
        content: str,
        title: str,
        theme: str | None = None,
        *,
        check_limits: bool = False,
    ) -> None:
        """Re-submit a story's media; prior cost records stay as history."""
        await self.queue_media_generation(
            story_id, media_type, content, title, theme, check_limits=check_limits,
        )

    # ──────── Status / usage ────────

    async def get_media_status(self, story_id: str) -> dict[str, str]:
        async with self.database.session_factory() as session:
            story = (
                await session.execute(select(Story).where(Story.id == story_id))
            ).scalar_one_or_none()
        if story is None:
            raise StoryNotFoundError(story_id)
        return story_media_status(story)

    async def check_media_limits(self, user_id: str, media_type: MediaType | str) -> QuotaSnapshot:
        async with self.database.session_factory() as session:
            return await quota.check_media_limits(session, user_id, media_type, settings=self.settings)

    async def get_media_usage(self, user_id: str, media_type: MediaType | str) -> QuotaSnapshot:
        async with self.database.session_factory() as session:
            return await quota.get_media_usage(session, user_id, media_type, settings=self.settings)

    def get_queue_counts(self) -> QueueCounts | None:
        """Aggregate queue depth, or None in degraded mode."""
        if self.queue is None:
            return None
        return self.queue.counts()

    # ──────── Worker ────────

    async def process_media_generation(self, job: MediaJob) -> dict[str, Any]:
        return await self.pipeline.process(job)

    async def close(self) -> None:
        if self.queue is not None:
            self.queue.close()
            self.queue = None


# ──────── Process-wide service ────────

_service: MediaService | None = None


async def init_media_service(settings: Settings | None = None) -> MediaService:
    """Build the process-wide media service.

    Broker failures are logged and leave the service in degraded mode; they
    never stop the application from starting.
    """
    global _service
    settings = settings or get_settings()

    from storymedia.database import get_database
    from storymedia.services.providers.registry import get_provider_registry

    database = get_database(settings)
    queue: MediaQueue | None = None
    try:
        client = connect_broker(settings)
        if client is not None:
            from storymedia.tasks import celery_app

            queue = MediaQueue(celery_app, client, settings)
    except Exception as e:
        logger.warning("Failed to initialize media generation queue: %s", e)

    _service = MediaService(database, get_provider_registry(settings), queue, settings)
    if queue is None:
        logger.warning("Redis not available, media generation will be disabled")
    else:
        logger.info("Media generation service initialized")
    return _service


async def shutdown_media_service() -> None:
    global _service
    if _service is not None:
        await _service.close()
        _service = None
    await close_db()


def get_media_service() -> MediaService:
    if _service is None:
        raise RuntimeError("Media service not initialized; call init_media_service() first")
    return _service


def set_media_service(service: MediaService | None) -> None:
    """Install an explicitly constructed service as the process-wide one."""
    global _service
    _service = service


async def queue_media_generation(
    story_id: str,
    media_type: MediaType | str,
    content: str,
    title: str,
    theme: str | None = None,
    *,
    check_limits: bool = False,
) -> None:
    await get_media_service().queue_media_generation(
        story_id, media_type, content, title, theme, check_limits=check_limits,
    )


async def regenerate_media(
    story_id: str,
    media_type: MediaType | str,
    content: str,
    title: str,
    theme: str | None = None,
) -> None:
    await get_media_service().regenerate_media(story_id, media_type, content, title, theme)


async def get_media_status(story_id: str) -> dict[str, str]:
    return await get_media_service().get_media_status(story_id)


async def check_media_limits(user_id: str, media_type: MediaType | str) -> QuotaSnapshot:
    return await get_media_service().check_media_limits(user_id, media_type)


async def get_media_usage(user_id: str, media_type: MediaType | str) -> QuotaSnapshot:
    return await get_media_service().get_media_usage(user_id, media_type)


def get_queue_counts() -> QueueCounts | None:
    return get_media_service().get_queue_counts()
