"""Admin endpoints — media queue depth for operational tooling."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from storymedia.services.media_service import get_media_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/media-queue/status")
async def media_queue_status():
    """Return waiting/active/completed/failed job counts for the media queue."""
    try:
        counts = get_media_service().get_queue_counts()
    except Exception as e:
        logger.error("Failed to get media queue status: %s", e)
        raise HTTPException(status_code=503, detail="Media queue status unavailable") from e

    if counts is None:
        return {
            "success": True,
            "queue": {
                "available": False,
                "message": "Media queue not available (Redis not connected)",
            },
        }
    return {"success": True, "queue": {"available": True, **counts.to_dict()}}
