from typing import Any, Optional


class StorageError(Exception):
    """Base class for every error raised by a storage driver."""


class ConfigurationError(StorageError):
    pass


class MissingCredential(ConfigurationError):
    pass


class UnsupportedAuthType(ConfigurationError):
    pass


class MissingIdentifier(ConfigurationError):
    pass


class AuthenticationSetupError(StorageError):
    """The backend client could not be set up with the given credentials.

    May be raised from the first remote call instead of at construction time.
    """


class BadPathError(StorageError):
    pass


class StreamReadError(StorageError):
    def __init__(self, message: str, content_path: str, bucket: Optional[str] = None):
        super().__init__(message)
        self.content_path = content_path
        self.bucket = bucket


class RemoteWriteError(StorageError):
    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class RemoteListError(StorageError):
    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class GitHubAPIError(Exception):
    def __init__(self, status_code: int, payload: Any):
        super().__init__(f"GitHub API responded with {status_code}: {payload}")
        self.status_code = status_code
        self.payload = payload
