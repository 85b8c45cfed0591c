from pydantic import BaseModel, ConfigDict
from typing import Any, List, Optional


class GitHubConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    authtype: str
    token: str
    baseurl: str = "https://api.github.com"
    owner: str
    repo: str
    path: str = "/"
    ref: str = "master"


class WriteRequest(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: str
    storage_top_level: str
    stream: Any
    content_length: int = 0
    content_type: str = "application/octet-stream"


class ListingResult(BaseModel):
    entries: List[str]
    page: Optional[str] = None
