"""Unit tests for the S3, MinIO and disk drivers."""

import os
import threading
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from minio.error import MinioException

from hub_storage.errors import BadPathError, ConfigurationError, RemoteListError, RemoteWriteError, StreamReadError
from hub_storage.storage.local import LocalStorage
from hub_storage.storage.minio import MinIOStorage
from hub_storage.storage.s3 import S3Storage


class TestS3Storage:
    """Test S3Storage with a mocked boto3 client."""

    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def driver(self, client):
        return S3Storage({"bucket": "hub"}, client=client)

    def test_requires_bucket(self):
        with pytest.raises(ConfigurationError):
            S3Storage({}, client=MagicMock())

    def test_read_url_prefix(self, driver):
        assert driver.read_url_prefix() == "https://hub.s3.amazonaws.com/"

    def test_custom_read_url(self, client):
        driver = S3Storage({"bucket": "hub", "readURL": {"s3": "https://cdn.example.com"}}, client=client)

        assert driver.read_url_prefix() == "https://cdn.example.com/"

    @pytest.mark.asyncio
    async def test_write(self, driver, client):
        url = await driver.write("foo.txt", "store1", b"data", 4, "text/plain")

        assert url == "https://hub.s3.amazonaws.com/store1/foo.txt"
        client.put_object.assert_called_once_with(
            Bucket="hub", Key="store1/foo.txt", Body=b"data", ContentType="text/plain"
        )

    @pytest.mark.asyncio
    async def test_write_rejected(self, driver, client):
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with pytest.raises(RemoteWriteError) as exc_info:
            await driver.write("foo.txt", "store1", b"data", 4, "text/plain")

        assert exc_info.value.payload["Code"] == "AccessDenied"

    @pytest.mark.asyncio
    async def test_bad_path(self, driver, client):
        with pytest.raises(BadPathError):
            await driver.write("../x", "store1", b"data", 4, "text/plain")

        client.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_with_continuation(self, driver, client):
        """Test that S3 continuation tokens are passed through both ways."""
        client.list_objects_v2.return_value = {
            "Contents": [{"Key": "store1/a.txt"}, {"Key": "store1/dir/b.txt"}],
            "IsTruncated": True,
            "NextContinuationToken": "tok-2",
        }

        result = await driver.list_files("store1", "tok-1")

        assert result.entries == ["a.txt", "dir/b.txt"]
        assert result.page == "tok-2"
        client.list_objects_v2.assert_called_once_with(Bucket="hub", Prefix="store1/", ContinuationToken="tok-1")

    @pytest.mark.asyncio
    async def test_list_complete(self, driver, client):
        client.list_objects_v2.return_value = {"IsTruncated": False}

        result = await driver.list_files("store1")

        assert result.entries == []
        assert result.page is None

    @pytest.mark.asyncio
    async def test_list_error(self, driver, client):
        client.list_objects_v2.side_effect = ClientError({"Error": {"Code": "NoSuchBucket"}}, "ListObjectsV2")

        with pytest.raises(RemoteListError):
            await driver.list_files("store1")


class TestMinIOStorage:
    """Test MinIOStorage with a mocked Minio client."""

    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def driver(self, client):
        return MinIOStorage({"bucket": "hub", "minioConfig": {"endpoint": "minio:9000"}}, client=client)

    def test_read_url_prefix(self, driver):
        assert driver.read_url_prefix() == "http://minio:9000/hub/"

    @pytest.mark.asyncio
    async def test_write(self, driver, client):
        url = await driver.write("foo.txt", "store1", b"data", 4, "text/plain")

        assert url == "http://minio:9000/hub/store1/foo.txt"
        args, kwargs = client.put_object.call_args
        assert args[0] == "hub"
        assert args[1] == "store1/foo.txt"
        assert args[2].read() == b"data"
        assert kwargs == {"length": 4, "content_type": "text/plain"}

    @pytest.mark.asyncio
    async def test_write_rejected(self, driver, client):
        client.put_object.side_effect = MinioException("denied")

        with pytest.raises(RemoteWriteError):
            await driver.write("foo.txt", "store1", b"data", 4, "text/plain")

    @pytest.mark.asyncio
    async def test_list(self, driver, client):
        client.list_objects.return_value = [
            MagicMock(object_name="store1/a.txt"),
            MagicMock(object_name="store1/b.txt"),
        ]

        result = await driver.list_files("store1")

        assert result.entries == ["a.txt", "b.txt"]
        assert result.page is None
        client.list_objects.assert_called_once_with("hub", prefix="store1/", recursive=True)


class TestLocalStorage:
    """Test LocalStorage against a temporary directory."""

    @pytest.fixture
    def driver(self, tmp_path):
        return LocalStorage({
            "bucket": "hub",
            "diskSettings": {"storageRootDirectory": str(tmp_path)},
            "readURL": {"disk": "http://localhost:3000/read"},
        })

    def test_requires_root(self):
        with pytest.raises(ConfigurationError):
            LocalStorage({"readURL": {"disk": "http://localhost"}})

    def test_requires_read_url(self, tmp_path):
        with pytest.raises(ConfigurationError):
            LocalStorage({"diskSettings": {"storageRootDirectory": str(tmp_path)}})

    @pytest.mark.asyncio
    async def test_write_and_list(self, driver, tmp_path):
        url = await driver.write("dir/foo.txt", "store1", b"data", 4, "text/plain")
        await driver.write("bar.txt", "store1", b"more", 4, "text/plain")

        assert url == "http://localhost:3000/read/store1/dir/foo.txt"
        assert (tmp_path / "store1" / "dir" / "foo.txt").read_bytes() == b"data"
        result = await driver.list_files("store1")
        assert result.entries == ["bar.txt", "dir/foo.txt"]

    @pytest.mark.asyncio
    async def test_overwrite(self, driver, tmp_path):
        """Test that the last write wins."""
        await driver.write("foo.txt", "store1", b"first", 5, "text/plain")
        await driver.write("foo.txt", "store1", b"second", 6, "text/plain")

        assert (tmp_path / "store1" / "foo.txt").read_bytes() == b"second"

    @pytest.mark.asyncio
    async def test_missing_namespace(self, driver):
        result = await driver.list_files("nothing-here")

        assert result.entries == []

    @pytest.mark.asyncio
    async def test_directory_check_runs_in_worker_thread(self, driver, monkeypatch):
        """Test that the namespace existence check stays off the event loop thread."""
        loop_thread = threading.get_ident()
        checked_from = []
        isdir = os.path.isdir

        def recording_isdir(path):
            if str(path).endswith("store1"):
                checked_from.append(threading.get_ident())
            return isdir(path)

        monkeypatch.setattr("hub_storage.storage.local.os.path.isdir", recording_isdir)

        await driver.list_files("store1")

        assert checked_from
        assert loop_thread not in checked_from

    @pytest.mark.asyncio
    async def test_stream_error_writes_nothing(self, driver, tmp_path, failing_stream):
        with pytest.raises(StreamReadError):
            await driver.write("foo.txt", "store1", failing_stream, 10, "text/plain")

        assert not (tmp_path / "store1").exists()
