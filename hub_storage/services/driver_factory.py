import logging
from typing import Optional

from hub_storage.config import STORAGE_DRIVER, load_driver_config
from hub_storage.errors import ConfigurationError
from hub_storage.storage.base import StorageDriver
from hub_storage.storage.github import GitHubStorage
from hub_storage.storage.local import LocalStorage
from hub_storage.storage.minio import MinIOStorage
from hub_storage.storage.s3 import S3Storage

logger = logging.getLogger(__name__)

DRIVERS = {
    "github": GitHubStorage,
    "s3": S3Storage,
    "minio": MinIOStorage,
    "disk": LocalStorage,
}


def get_storage(config: Optional[dict] = None) -> StorageDriver:
    if config is None:
        config = load_driver_config()
    driver = config.get("driver") or STORAGE_DRIVER
    logger.info(f"storage driver is set to: '{driver}'")
    try:
        driver_class = DRIVERS[driver]
    except KeyError:
        raise ConfigurationError(
            f"Unknown storage driver '{driver}'. Supported drivers: {', '.join(sorted(DRIVERS))}"
        ) from None
    return driver_class(config)
