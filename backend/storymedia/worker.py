"""Media worker entry point — run with: python -m storymedia.worker

Starts a Celery worker consuming the media generation queue with bounded
concurrency. If the broker is unreachable the worker is never created.
"""

from __future__ import annotations

import argparse
import logging
import sys

from storymedia.config import get_settings
from storymedia.services.media_queue import connect_broker

logger = logging.getLogger("storymedia.worker")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Media generation worker process")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    parser.add_argument(
        "-c", "--concurrency",
        type=int,
        default=None,
        help="Concurrent jobs (defaults to MEDIA_WORKER_CONCURRENCY)",
    )
    return parser.parse_args(argv)


def build_worker_argv(concurrency: int, queue_name: str, loglevel: str) -> list[str]:
    return [
        "worker",
        f"--concurrency={concurrency}",
        f"--queues={queue_name}",
        f"--loglevel={loglevel}",
    ]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.DEBUG else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    client = connect_broker(settings)
    if client is None:
        logger.warning("Cannot create media worker: Redis not available")
        return 1
    client.close()

    from storymedia.tasks import celery_app

    concurrency = args.concurrency or settings.MEDIA_WORKER_CONCURRENCY
    logger.info(
        "Starting media worker on queue %s (concurrency=%d)",
        settings.MEDIA_QUEUE_NAME, concurrency,
    )
    celery_app.worker_main(build_worker_argv(
        concurrency,
        settings.MEDIA_QUEUE_NAME,
        "DEBUG" if args.verbose else "INFO",
    ))
    return 0


if __name__ == "__main__":
    sys.exit(main())
