"""Pytest configuration helpers.

Puts ``backend/`` on ``sys.path`` so tests can import the ``storymedia``
package without an editable install, and provides database, storage and
queue fixtures shared across the suite.
"""
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from storymedia.config import Settings  # noqa: E402
from storymedia.database import Database  # noqa: E402
from storymedia.models import Story  # noqa: E402
from storymedia.services.media_queue import QueueCounts  # noqa: E402
from storymedia.services.storage import StorageService, UploadResult  # noqa: E402


class FakeStorage(StorageService):
    """In-memory storage that records every upload."""

    def __init__(self):
        self.uploads = []
        self.deleted = []

    async def upload_file(self, data, filename, mime_type, owner_id):
        key = f"{owner_id}/{filename}"
        self.uploads.append({
            "data": data, "filename": filename, "mime_type": mime_type, "owner_id": owner_id,
        })
        return UploadResult(url=await self.get_file_url(key), key=key)

    async def get_file_url(self, key):
        return f"https://cdn.test/{key}"

    async def delete_file(self, key):
        self.deleted.append(key)


class FakeQueue:
    """Records admitted jobs instead of talking to a broker."""

    def __init__(self, fail=False):
        self.jobs = []
        self.fail = fail
        self.closed = False

    def add(self, job):
        if self.fail:
            raise ConnectionError("broker went away")
        self.jobs.append(job)
        return f"task-{len(self.jobs)}"

    def counts(self):
        return QueueCounts(waiting=len(self.jobs), active=0, completed=0, failed=0)

    def close(self):
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        VIDEO_PROVIDER="placeholder",
        AUDIO_PROVIDER="placeholder",
        PLACEHOLDER_DELAY=0,
        MEDIA_VOLUME=str(tmp_path / "media"),
    )


@pytest.fixture
async def database(settings):
    db = Database(settings.DATABASE_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def fake_queue():
    return FakeQueue()


@pytest.fixture
async def story(database):
    async with database.session_factory() as session:
        s = Story(user_id="user-1", title="The Quiet Lake", content="<p>Hello world</p>")
        session.add(s)
        await session.commit()
        return s
