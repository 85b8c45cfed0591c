import asyncio
import logging
import os
from typing import Optional

from hub_storage.errors import ConfigurationError, RemoteListError, RemoteWriteError
from hub_storage.models import ListingResult, WriteRequest
from hub_storage.storage.base import StorageDriver

logger = logging.getLogger(__name__)


class LocalStorage(StorageDriver):
    def __init__(self, config: dict):
        super().__init__(config)
        settings = config.get("diskSettings") or {}
        self.storage_root = settings.get("storageRootDirectory")
        if not self.storage_root:
            raise ConfigurationError("Disk driver requires diskSettings.storageRootDirectory")
        self.read_url = (config.get("readURL") or {}).get("disk")
        if not self.read_url:
            raise ConfigurationError("Disk driver requires a read URL")

    def read_url_prefix(self) -> str:
        return self.read_url.rstrip("/") + "/"

    def _save(self, path: str, content: bytes):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)

    def _walk(self, top: str):
        entries = []
        if not os.path.isdir(top):
            return entries
        for dirpath, _, filenames in os.walk(top):
            for name in filenames:
                entries.append(os.path.relpath(os.path.join(dirpath, name), top).replace(os.sep, "/"))
        return sorted(entries)

    async def perform_write(self, request: WriteRequest) -> str:
        content_path = f"{request.storage_top_level}/{request.path}"
        content = await self.read_content(request, content_path)
        path = os.path.join(self.storage_root, request.storage_top_level, request.path)
        try:
            await asyncio.to_thread(self._save, path, content)
        except OSError as e:
            logger.error(f"failed to store {content_path} on disk")
            raise RemoteWriteError(f"Disk storage driver failed to write {content_path}", payload=str(e)) from e
        return f"{self.read_url_prefix()}{content_path}"

    async def list_files(self, storage_top_level: str, page: Optional[str] = None) -> ListingResult:
        top = os.path.join(self.storage_root, storage_top_level)
        try:
            entries = await asyncio.to_thread(self._walk, top)
        except OSError as e:
            raise RemoteListError(f"Disk storage driver failed to list {storage_top_level}", payload=str(e)) from e
        return ListingResult(entries=entries, page=None)
