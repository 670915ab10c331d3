"""Tests for local first-party media storage."""

import os

import pytest

from storymedia.services.storage import LocalStorageService


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorageService(str(tmp_path), "/media/")


async def test_upload_writes_file_and_returns_url(local_storage, tmp_path):
    result = await local_storage.upload_file(b"ID3DATA", "story-1.mp3", "audio/mpeg", "system")

    assert result.key.startswith("system/")
    assert result.key.endswith("-story-1.mp3")
    assert result.url == f"/media/{result.key}"
    with open(tmp_path / result.key, "rb") as f:
        assert f.read() == b"ID3DATA"


async def test_uploads_never_collide(local_storage):
    first = await local_storage.upload_file(b"a", "x.mp4", "video/mp4", "system")
    second = await local_storage.upload_file(b"b", "x.mp4", "video/mp4", "system")
    assert first.key != second.key


async def test_delete_removes_file_and_tolerates_missing(local_storage, tmp_path):
    result = await local_storage.upload_file(b"a", "x.mp4", "video/mp4", "system")

    await local_storage.delete_file(result.key)
    assert not os.path.exists(tmp_path / result.key)
    await local_storage.delete_file(result.key)


async def test_keys_cannot_escape_the_volume(local_storage):
    with pytest.raises(ValueError, match="Invalid storage key"):
        await local_storage.delete_file("../outside.txt")
