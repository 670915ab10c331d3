"""Tests for building and tearing down the process-wide media service."""

import logging

import pytest

from storymedia import database as database_module
from storymedia.services import media_service
from storymedia.services.media_queue import MediaQueue
from storymedia.services.providers import registry as registry_module


class StubRedis:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def fresh_singletons(monkeypatch):
    monkeypatch.setattr(database_module, "_database", None)
    monkeypatch.setattr(registry_module, "_registry", None)
    monkeypatch.setattr(media_service, "_service", None)


async def test_unreachable_broker_starts_in_degraded_mode(monkeypatch, settings):
    monkeypatch.setattr(media_service, "connect_broker", lambda s: None)

    service = await media_service.init_media_service(settings)
    try:
        assert service.available is False
        assert service.get_queue_counts() is None
        assert media_service.get_media_service() is service
    finally:
        await media_service.shutdown_media_service()


async def test_broker_errors_are_logged_not_raised(monkeypatch, settings, caplog):
    def boom(s):
        raise RuntimeError("bad broker url")

    monkeypatch.setattr(media_service, "connect_broker", boom)

    with caplog.at_level(logging.WARNING, logger="storymedia.services.media_service"):
        service = await media_service.init_media_service(settings)
    try:
        assert service.available is False
        assert "bad broker url" in caplog.text
    finally:
        await media_service.shutdown_media_service()


async def test_reachable_broker_wires_a_media_queue(monkeypatch, settings):
    client = StubRedis()
    monkeypatch.setattr(media_service, "connect_broker", lambda s: client)

    service = await media_service.init_media_service(settings)

    assert isinstance(service.queue, MediaQueue)
    assert service.available is True
    await media_service.shutdown_media_service()
    assert client.closed is True
    with pytest.raises(RuntimeError, match="not initialized"):
        media_service.get_media_service()


async def test_service_is_built_from_the_given_settings(monkeypatch, settings):
    monkeypatch.setattr(media_service, "connect_broker", lambda s: None)

    service = await media_service.init_media_service(settings)
    try:
        assert service.database.url == settings.DATABASE_URL
        assert service.registry.settings is settings
        assert service.settings is settings
    finally:
        await media_service.shutdown_media_service()
