"""Tests for the admin media queue status endpoint."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storymedia.api.router import api_router
from storymedia.services.media_queue import QueueCounts
from storymedia.services.media_service import set_media_service


class StubService:
    def __init__(self, counts=None, error=None):
        self.counts = counts
        self.error = error

    def get_queue_counts(self):
        if self.error:
            raise self.error
        return self.counts


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(api_router)
    yield TestClient(app)
    set_media_service(None)


def test_reports_counts_when_available(client):
    set_media_service(StubService(QueueCounts(waiting=1, active=2, completed=3, failed=4)))

    resp = client.get("/api/admin/media-queue/status")

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "queue": {
            "available": True,
            "waiting": 1, "active": 2, "completed": 3, "failed": 4, "total": 10,
        },
    }


def test_degraded_mode_reports_unavailable(client):
    set_media_service(StubService(None))

    resp = client.get("/api/admin/media-queue/status")

    assert resp.status_code == 200
    assert resp.json()["queue"] == {
        "available": False,
        "message": "Media queue not available (Redis not connected)",
    }


def test_broker_error_maps_to_503(client):
    set_media_service(StubService(error=ConnectionError("redis down")))

    resp = client.get("/api/admin/media-queue/status")

    assert resp.status_code == 503


def test_uninitialized_service_maps_to_503(client):
    set_media_service(None)
    assert client.get("/api/admin/media-queue/status").status_code == 503
