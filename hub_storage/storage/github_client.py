import base64
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from hub_storage.errors import AuthenticationSetupError, GitHubAPIError

logger = logging.getLogger(__name__)

USER_AGENT = "hub-storage-githubdriver"


class GitHubClient:
    """Minimal async client for the GitHub contents API."""

    def __init__(self, token: str, base_url: str = "https://api.github.com",
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        try:
            self.http = httpx.AsyncClient(
                base_url=base_url,
                headers={
                    "Accept": "application/vnd.github.v3+json",
                    "User-Agent": USER_AGENT,
                    "Authorization": f"token {token}",
                },
                transport=transport,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise AuthenticationSetupError(f"could not set up GitHub client for {base_url}: {e}") from e

    async def aclose(self):
        await self.http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self.http.request(method, url, **kwargs)
        if response.status_code == 401:
            raise AuthenticationSetupError(f"GitHub rejected the configured credentials: {_payload(response)}")
        return response

    async def _get_file_sha(self, owner: str, repo: str, path: str, branch: str) -> Optional[str]:
        response = await self._request("GET", _contents_url(owner, repo, path), params={"ref": branch})
        if response.status_code == 404:
            return None
        if response.is_error:
            raise GitHubAPIError(response.status_code, _payload(response))
        data = response.json()
        if isinstance(data, dict):
            return data.get("sha")
        return None

    async def create_or_update_file(self, owner: str, repo: str, path: str, branch: str,
                                    message: str, committer: dict, content: bytes) -> dict:
        body = {
            "message": message,
            "branch": branch,
            "committer": committer,
            "content": base64.b64encode(content).decode("ascii"),
        }
        sha = await self._get_file_sha(owner, repo, path, branch)
        if sha:
            body["sha"] = sha
        response = await self._request("PUT", _contents_url(owner, repo, path), json=body)
        if response.is_error:
            raise GitHubAPIError(response.status_code, _payload(response))
        data = response.json()
        return {"commit_id": data["commit"]["sha"]}

    async def get_directory_contents(self, owner: str, repo: str, path: str,
                                     ref: Optional[str] = None) -> list:
        params = {"ref": ref} if ref else None
        response = await self._request("GET", _contents_url(owner, repo, path), params=params)
        if response.is_error:
            raise GitHubAPIError(response.status_code, _payload(response))
        data = response.json()
        if not isinstance(data, list):
            raise GitHubAPIError(response.status_code, {"message": f"{path} is not a directory"})
        return data


def _contents_url(owner: str, repo: str, path: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/contents/{quote(path, safe='/')}"


def _payload(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return response.text
