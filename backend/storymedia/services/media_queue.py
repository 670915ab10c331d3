"""Broker-backed media generation queue.

Jobs are Celery tasks on the ``media-generation`` queue (Redis broker).
Queue-depth counts for operational tooling come from Redis: the broker list
length for waiting jobs, plus counters maintained by Celery signal handlers
in ``storymedia.tasks.media_tasks`` for active/completed/failed jobs.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

import redis
from celery import Celery

from storymedia.config import Settings, get_settings
from storymedia.services.pipeline import MediaJob

logger = logging.getLogger(__name__)

COUNTER_PREFIX = "storymedia:queue:"
ACTIVE_KEY = f"{COUNTER_PREFIX}active"
COMPLETED_KEY = f"{COUNTER_PREFIX}completed"
FAILED_KEY = f"{COUNTER_PREFIX}failed"


@dataclass(frozen=True)
class QueueCounts:
    waiting: int
    active: int
    completed: int
    failed: int

    @property
    def total(self) -> int:
        return self.waiting + self.active + self.completed + self.failed

    def to_dict(self) -> dict[str, int]:
        return {**asdict(self), "total": self.total}


def backoff_delay(retries: int, base: float) -> float:
    """Exponential backoff: ``base``, ``2 * base``, ``4 * base``, ..."""
    return base * (2 ** retries)


def connect_broker(settings: Settings | None = None) -> redis.Redis | None:
    """Ping the broker; return a client, or None when it is unreachable."""
    settings = settings or get_settings()
    client = redis.Redis.from_url(
        settings.REDIS_URL,
        socket_connect_timeout=settings.BROKER_CONNECT_TIMEOUT,
        socket_timeout=settings.BROKER_CONNECT_TIMEOUT,
    )
    try:
        client.ping()
    except redis.RedisError as e:
        logger.warning("Redis broker unreachable at %s, media generation disabled: %s", settings.REDIS_URL, e)
        client.close()
        return None
    logger.info("Redis connected for media generation queue")
    return client


class MediaQueue:
    """Enqueue media jobs and report queue depth."""

    def __init__(
        self,
        celery_app: Celery,
        redis_client: redis.Redis,
        settings: Settings | None = None,
    ) -> None:
        self.celery_app = celery_app
        self.redis = redis_client
        self.settings = settings or get_settings()

    def add(self, job: MediaJob) -> str:
        """Persist a job to the broker; returns the broker task id."""
        from storymedia.tasks import MEDIA_TASK_NAME

        result = self.celery_app.send_task(
            MEDIA_TASK_NAME,
            args=[job.to_dict()],
            queue=self.settings.MEDIA_QUEUE_NAME,
        )
        logger.info(
            "Queued %s generation for story %s (task=%s, generation=%d)",
            job.media_type, job.story_id, result.id, job.generation,
        )
        return result.id

    def counts(self) -> QueueCounts:
        pipe = self.redis.pipeline()
        pipe.llen(self.settings.MEDIA_QUEUE_NAME)
        pipe.get(ACTIVE_KEY)
        pipe.get(COMPLETED_KEY)
        pipe.get(FAILED_KEY)
        waiting, active, completed, failed = pipe.execute()
        return QueueCounts(
            waiting=int(waiting or 0),
            active=max(0, int(active or 0)),
            completed=int(completed or 0),
            failed=int(failed or 0),
        )

    def close(self) -> None:
        self.redis.close()
