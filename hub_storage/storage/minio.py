import asyncio
import logging
from io import BytesIO
from typing import Optional

from minio import Minio
from minio.error import MinioException

from hub_storage.errors import ConfigurationError, RemoteListError, RemoteWriteError
from hub_storage.models import ListingResult, WriteRequest
from hub_storage.storage.base import StorageDriver

logger = logging.getLogger(__name__)


class MinIOStorage(StorageDriver):
    def __init__(self, config: dict, client=None):
        super().__init__(config)
        if not self.bucket:
            raise ConfigurationError("MinIO driver requires a bucket")
        settings = config.get("minioConfig") or {}
        self.endpoint = settings.get("endpoint", "localhost:9000")
        self.secure = bool(settings.get("secure", False))
        self.client = client or Minio(
            self.endpoint,
            access_key=settings.get("accessKey"),
            secret_key=settings.get("secretKey"),
            secure=self.secure
        )
        self.read_url = (config.get("readURL") or {}).get("minio")

    def read_url_prefix(self) -> str:
        if self.read_url:
            return self.read_url.rstrip("/") + "/"
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint}/{self.bucket}/"

    async def perform_write(self, request: WriteRequest) -> str:
        object_name = f"{request.storage_top_level}/{request.path}"
        content = await self.read_content(request, object_name)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                self.bucket,
                object_name,
                BytesIO(content),
                length=len(content),
                content_type=request.content_type
            )
        except MinioException as e:
            logger.error(f"failed to store {object_name} in bucket {self.bucket}")
            raise RemoteWriteError(f"MinIO storage driver failed to write {object_name} in bucket {self.bucket}",
                                   payload=str(e)) from e
        return f"{self.read_url_prefix()}{object_name}"

    async def list_files(self, storage_top_level: str, page: Optional[str] = None) -> ListingResult:
        prefix = f"{storage_top_level}/"

        def _collect():
            objects = self.client.list_objects(self.bucket, prefix=prefix, recursive=True)
            return [obj.object_name[len(prefix):] for obj in objects]

        try:
            entries = await asyncio.to_thread(_collect)
        except MinioException as e:
            logger.error(f"failed to list {prefix} in bucket {self.bucket}")
            raise RemoteListError(f"MinIO storage driver failed to list {prefix} in bucket {self.bucket}",
                                  payload=str(e)) from e
        return ListingResult(entries=entries, page=None)
