import logging
from typing import Optional

from hub_storage.errors import BadPathError, StreamReadError
from hub_storage.models import ListingResult, WriteRequest
from hub_storage.utils.streams import read_stream

logger = logging.getLogger(__name__)


def is_path_valid(path: str) -> bool:
    # for now, only disallow double dots
    return ".." not in path


class StorageDriver:
    def __init__(self, config: dict):
        self.bucket = config.get("bucket")

    @staticmethod
    def is_path_valid(path: str) -> bool:
        return is_path_valid(path)

    def read_url_prefix(self) -> str:
        raise NotImplementedError

    async def write(self, path: str, storage_top_level: str, stream,
                    content_length: int = 0,
                    content_type: str = "application/octet-stream") -> str:
        if not self.is_path_valid(path):
            raise BadPathError("Invalid Path")
        request = WriteRequest(
            path=path,
            storage_top_level=storage_top_level,
            stream=stream,
            content_length=content_length,
            content_type=content_type,
        )
        return await self.perform_write(request)

    async def perform_write(self, request: WriteRequest) -> str:
        raise NotImplementedError

    async def list_files(self, storage_top_level: str, page: Optional[str] = None) -> ListingResult:
        raise NotImplementedError

    async def read_content(self, request: WriteRequest, content_path: str) -> bytes:
        try:
            return await read_stream(request.stream)
        except Exception as e:
            logger.error(f"failed to read upload stream for {content_path} in bucket {self.bucket}")
            raise StreamReadError(
                f"failed to read content for {content_path} in bucket {self.bucket}: {e}",
                content_path=content_path,
                bucket=self.bucket,
            ) from e
