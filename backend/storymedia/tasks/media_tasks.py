"""Celery task for media generation.

The task runs the pipeline's processing routine. Retriable failures are
rescheduled with exponential backoff (2s, 4s) until the attempt budget is
spent; the last failure is re-raised so the broker records a terminal job
failure.
"""

from __future__ import annotations

import logging

import redis
from celery import shared_task
from celery.signals import task_failure, task_postrun, task_prerun, task_success

from storymedia.config import get_settings
from storymedia.services.media_queue import ACTIVE_KEY, COMPLETED_KEY, FAILED_KEY, backoff_delay
from storymedia.services.pipeline import MediaJob, MediaPipeline
from storymedia.tasks import MEDIA_TASK_NAME, run_async

logger = logging.getLogger(__name__)
settings = get_settings()

_pipeline: MediaPipeline | None = None


def get_pipeline() -> MediaPipeline:
    """Lazily build the worker-process pipeline from settings."""
    global _pipeline
    if _pipeline is None:
        from storymedia.database import get_database
        from storymedia.services.providers.registry import get_provider_registry

        _pipeline = MediaPipeline(get_database().session_factory, get_provider_registry())
    return _pipeline


@shared_task(bind=True, name=MEDIA_TASK_NAME, max_retries=settings.MEDIA_JOB_ATTEMPTS - 1)
def generate_media(self, job: dict):
    """Generate one media asset for a story."""
    media_job = MediaJob.from_dict(job)
    attempt = self.request.retries + 1

    try:
        return run_async(get_pipeline().process(media_job))
    except Exception as exc:
        retriable = getattr(exc, "retriable", True)
        if not retriable or self.request.retries >= self.max_retries:
            logger.error(
                "%s generation for story %s failed permanently (attempt %d/%d): %s",
                media_job.media_type, media_job.story_id, attempt, self.max_retries + 1, exc,
            )
            raise

        countdown = backoff_delay(self.request.retries, settings.MEDIA_JOB_BACKOFF)
        logger.warning(
            "%s generation for story %s failed (attempt %d/%d), retrying in %.0fs: %s",
            media_job.media_type, media_job.story_id, attempt, self.max_retries + 1, countdown, exc,
        )
        raise self.retry(exc=exc, countdown=countdown)


# ──────── Queue-depth counters (read by MediaQueue.counts) ────────

_counter_client: redis.Redis | None = None


def _counters() -> redis.Redis:
    global _counter_client
    if _counter_client is None:
        _counter_client = redis.Redis.from_url(settings.REDIS_URL)
    return _counter_client


def _bump(key: str, amount: int) -> None:
    try:
        _counters().incrby(key, amount)
    except redis.RedisError:
        # Best-effort: counters must never fail the task
        logger.warning("Failed to update queue counter %s", key, exc_info=True)


def _is_media_task(sender) -> bool:
    return getattr(sender, "name", None) == MEDIA_TASK_NAME


@task_prerun.connect
def _on_prerun(sender=None, **kwargs):
    if _is_media_task(sender):
        _bump(ACTIVE_KEY, 1)


@task_postrun.connect
def _on_postrun(sender=None, **kwargs):
    if _is_media_task(sender):
        _bump(ACTIVE_KEY, -1)


@task_success.connect
def _on_success(sender=None, result=None, **kwargs):
    if _is_media_task(sender):
        _bump(COMPLETED_KEY, 1)
        logger.info("Media generation job %s completed", sender.request.id)


@task_failure.connect
def _on_failure(sender=None, task_id=None, exception=None, **kwargs):
    if _is_media_task(sender):
        _bump(FAILED_KEY, 1)
        logger.error("Media generation job %s failed: %s", task_id, exception)
