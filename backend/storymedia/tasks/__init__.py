"""Celery application configuration."""

import asyncio
import threading

from celery import Celery

from storymedia.config import get_settings

settings = get_settings()

MEDIA_TASK_NAME = "storymedia.tasks.media_tasks.generate_media"

celery_app = Celery(
    "storymedia",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "storymedia.tasks.media_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,               # ACK after task completes, not on receive
    task_reject_on_worker_lost=True,    # Re-queue task if worker crashes/restarts
    worker_prefetch_multiplier=1,       # Fetch one task at a time per worker
    worker_concurrency=settings.MEDIA_WORKER_CONCURRENCY,
    task_routes={MEDIA_TASK_NAME: {"queue": settings.MEDIA_QUEUE_NAME}},
    broker_connection_retry_on_startup=False,
)

# Thread-local storage for event loop reuse within Celery workers
_thread_local = threading.local()


def run_async(coro):
    """Run async code in a sync Celery task.

    Reuses a thread-local event loop so the async DB engine and HTTP clients
    stay bound to one loop across tasks in the same worker thread.
    """
    loop = getattr(_thread_local, "loop", None)
    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        _thread_local.loop = loop
    return loop.run_until_complete(coro)
