"""Shared fixtures for the storage driver tests."""

import pytest


@pytest.fixture
def gh_config():
    """Hub-style configuration for a fully specified GitHub driver."""
    return {
        "driver": "github",
        "bucket": "hub",
        "ghConfig": {
            "authtype": "token",
            "token": "ghp_test",
            "baseurl": "https://api.github.test",
            "owner": "acme",
            "repo": "site",
            "path": "/",
            "ref": "main",
        },
    }


@pytest.fixture
def failing_stream():
    """Async stream that errors out after the first chunk."""

    async def _stream():
        yield b"partial"
        raise OSError("connection reset by peer")

    return _stream()
