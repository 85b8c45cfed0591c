import asyncio
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from hub_storage.errors import ConfigurationError, RemoteListError, RemoteWriteError
from hub_storage.models import ListingResult, WriteRequest
from hub_storage.storage.base import StorageDriver

logger = logging.getLogger(__name__)


class S3Storage(StorageDriver):
    def __init__(self, config: dict, client=None):
        super().__init__(config)
        if not self.bucket:
            raise ConfigurationError("S3 driver requires a bucket")
        credentials = config.get("awsCredentials") or {}
        self.client = client or boto3.client(
            "s3",
            region_name=credentials.get("region"),
            aws_access_key_id=credentials.get("accessKeyId"),
            aws_secret_access_key=credentials.get("secretAccessKey")
        )
        self.read_url = (config.get("readURL") or {}).get("s3")

    def read_url_prefix(self) -> str:
        if self.read_url:
            return self.read_url.rstrip("/") + "/"
        return f"https://{self.bucket}.s3.amazonaws.com/"

    async def perform_write(self, request: WriteRequest) -> str:
        key = f"{request.storage_top_level}/{request.path}"
        content = await self.read_content(request, key)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=request.content_type
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"failed to store {key} in bucket {self.bucket}")
            payload = e.response.get("Error") if isinstance(e, ClientError) else str(e)
            raise RemoteWriteError(f"S3 storage driver failed to write {key} in bucket {self.bucket}",
                                   payload=payload) from e
        logger.debug(f"stored {key} in bucket {self.bucket}")
        return f"{self.read_url_prefix()}{key}"

    async def list_files(self, storage_top_level: str, page: Optional[str] = None) -> ListingResult:
        prefix = f"{storage_top_level}/"
        params = {"Bucket": self.bucket, "Prefix": prefix}
        if page:
            params["ContinuationToken"] = page
        try:
            response = await asyncio.to_thread(self.client.list_objects_v2, **params)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"failed to list {prefix} in bucket {self.bucket}")
            payload = e.response.get("Error") if isinstance(e, ClientError) else str(e)
            raise RemoteListError(f"S3 storage driver failed to list {prefix} in bucket {self.bucket}",
                                  payload=payload) from e
        entries = [obj["Key"][len(prefix):] for obj in response.get("Contents", [])]
        next_page = response.get("NextContinuationToken") if response.get("IsTruncated") else None
        return ListingResult(entries=entries, page=next_page)
