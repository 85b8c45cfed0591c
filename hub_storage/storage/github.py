import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from hub_storage.errors import (
    ConfigurationError,
    GitHubAPIError,
    MissingCredential,
    MissingIdentifier,
    RemoteListError,
    RemoteWriteError,
    UnsupportedAuthType,
)
from hub_storage.models import GitHubConfig, ListingResult, WriteRequest
from hub_storage.storage.base import StorageDriver
from hub_storage.storage.github_client import GitHubClient

logger = logging.getLogger(__name__)

SUPPORTED_AUTH_TYPES = ("token", "oauth")
COMMIT_MESSAGE = "Store content from hub"
COMMITTER = {"name": "hub", "email": "hub@localhost"}


def validate_github_config(raw: Optional[dict]) -> GitHubConfig:
    if not raw:
        raise ConfigurationError("Configuration is missing for GitHub driver")

    authtype = raw.get("authtype")
    if authtype not in SUPPORTED_AUTH_TYPES:
        raise UnsupportedAuthType('Using an unsupported auth type. Only "token" or "oauth" are supported')
    if not raw.get("token"):
        raise MissingCredential(f"Using {authtype} authentication but no token supplied")
    if not raw.get("owner"):
        raise MissingIdentifier("You must supply an owner")
    if not raw.get("repo"):
        raise MissingIdentifier("You must supply a repo")

    values = {k: v for k, v in raw.items() if v not in ("", None)}
    if "path" not in values:
        logger.info("setting path to / as its not supplied in GitHub driver configuration")
    if "ref" not in values:
        logger.info('setting ref to "master" as its not supplied in GitHub driver configuration')
    try:
        return GitHubConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid GitHub driver configuration: {e}") from e


class GitHubStorage(StorageDriver):
    """Stores content as commits on a fixed branch of a GitHub repository."""

    def __init__(self, config: dict, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(config)
        self.settings = validate_github_config(config.get("ghConfig"))
        self.owner = self.settings.owner
        self.repo = self.settings.repo
        self.path = self.settings.path
        self.ref = self.settings.ref
        logger.info("about to authenticate to GitHub")
        self.client = GitHubClient(self.settings.token, self.settings.baseurl, transport=transport)

    def read_url_prefix(self) -> str:
        return f"https://raw.githubusercontent.com/{self.owner}/{self.repo}/{self.ref}/"

    async def perform_write(self, request: WriteRequest) -> str:
        content_path = f"{request.storage_top_level}/{request.path}"
        download_url = f"{self.read_url_prefix()}{quote(content_path, safe='/')}"

        content = await self.read_content(request, content_path)

        try:
            result = await self.client.create_or_update_file(
                self.owner,
                self.repo,
                content_path,
                branch=self.ref,
                message=COMMIT_MESSAGE,
                committer=COMMITTER,
                content=content,
            )
        except (GitHubAPIError, httpx.HTTPError) as e:
            logger.error(f"failed to store {content_path} using GitHub driver")
            raise RemoteWriteError(
                f"GitHub storage driver failed: failed to write file {content_path} in bucket {self.bucket}",
                payload=getattr(e, "payload", str(e)),
            ) from e

        logger.debug(f"stored {content_path} with commit {result['commit_id']}")
        return download_url

    def _listing_path(self, storage_top_level: str) -> str:
        parts = (self.path.strip("/"), storage_top_level.strip("/"))
        return "/".join(p for p in parts if p)

    async def list_files(self, storage_top_level: str, page: Optional[str] = None) -> ListingResult:
        path = self._listing_path(storage_top_level)
        if page:
            logger.debug(f"ignoring page token {page!r}, GitHub listings are not paginated")
        try:
            contents = await self.client.get_directory_contents(self.owner, self.repo, path, ref=self.ref)
        except (GitHubAPIError, httpx.HTTPError) as e:
            logger.error(f"failed to list {path} using GitHub driver")
            raise RemoteListError(
                f"GitHub storage driver failed: failed to list files under {path}",
                payload=getattr(e, "payload", str(e)),
            ) from e
        return ListingResult(entries=[entry["name"] for entry in contents], page=None)
