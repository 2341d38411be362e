"""Shared fixtures: fake collaborators for badge requests."""

import httpx
import pytest

from downloadbadge.errors import FetchError

SVG_BODY = b'<svg xmlns="http://www.w3.org/2000/svg"><text>shields</text></svg>'


class RecordingFetcher:
    """Fetcher double: records URLs and returns a canned body or fails."""

    def __init__(self, body: bytes = SVG_BODY, *, fail: bool = False) -> None:
        self.body = body
        self.fail = fail
        self.calls: list[tuple[str, str | None]] = []

    async def fetch(self, url: str, *, request_name: str | None = None) -> bytes:
        self.calls.append((url, request_name))
        if self.fail:
            raise FetchError(url, "connection refused")
        return self.body


@pytest.fixture
def fetcher() -> RecordingFetcher:
    return RecordingFetcher()


@pytest.fixture
def failing_fetcher() -> RecordingFetcher:
    return RecordingFetcher(fail=True)


def mock_client(handler, **kwargs) -> httpx.AsyncClient:
    """An AsyncClient whose requests are answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), **kwargs)
