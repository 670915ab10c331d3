"""First-party object storage for generated media.

Providers never hand out third-party URLs: generated bytes are re-uploaded
here and the returned URL is what ends up on the story.
"""

from __future__ import annotations

import logging
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

from storymedia.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    url: str
    key: str


class StorageService(ABC):
    """Upload/delete/URL operations over binary objects."""

    @abstractmethod
    async def upload_file(
        self, data: bytes, filename: str, mime_type: str, owner_id: str
    ) -> UploadResult:
        ...

    @abstractmethod
    async def get_file_url(self, key: str) -> str:
        ...

    @abstractmethod
    async def delete_file(self, key: str) -> None:
        ...


class LocalStorageService(StorageService):
    """Stores objects under the media volume, served from MEDIA_BASE_URL."""

    def __init__(self, root: str, base_url: str) -> None:
        self.root = root
        self.base_url = base_url.rstrip("/")

    async def upload_file(
        self, data: bytes, filename: str, mime_type: str, owner_id: str
    ) -> UploadResult:
        key = f"{owner_id}/{uuid.uuid4()}-{filename}"
        full_path = self._path(key)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "wb") as f:
            f.write(data)

        logger.info("Stored %s (%s, %d bytes)", key, mime_type, len(data))
        return UploadResult(url=await self.get_file_url(key), key=key)

    async def get_file_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    async def delete_file(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            logger.warning("Delete skipped, object not found: %s", key)

    def _path(self, key: str) -> str:
        root = os.path.abspath(self.root)
        full_path = os.path.abspath(os.path.join(root, key))
        if not full_path.startswith(root + os.sep):
            raise ValueError(f"Invalid storage key: {key}")
        return full_path


_storage: StorageService | None = None


def get_storage_service(settings: Settings | None = None) -> StorageService:
    """Return the process-wide storage service."""
    global _storage
    if _storage is None:
        settings = settings or get_settings()
        _storage = LocalStorageService(settings.MEDIA_VOLUME, settings.MEDIA_BASE_URL)
    return _storage
