"""Outbound fetch of rendered badges.

Thin httpx wrapper. One attempt per call: timeouts, transport errors and
non-2xx responses all surface as ``FetchError``, which the badge request
turns into a locally rendered fallback.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx

from downloadbadge.config import BadgeConfig
from downloadbadge.errors import FetchError

logger = logging.getLogger("downloadbadge.fetch")


@runtime_checkable
class Fetcher(Protocol):
    """Fetches a URL and returns the raw response body."""

    async def fetch(self, url: str, *, request_name: str | None = None) -> bytes: ...


class BadgeFetcher:
    """Fetches badges over HTTP with a shared ``httpx.AsyncClient``.

    The client is created lazily unless one is passed in (tests pass a
    client built on ``httpx.MockTransport``). Use as an async context
    manager, or call ``aclose()``, to release connections::

        async with BadgeFetcher(config) as fetcher:
            body = await fetcher.fetch(url)
    """

    __slots__ = ("_client", "_owns_client", "config")

    def __init__(
        self,
        config: BadgeConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or BadgeConfig()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> BadgeFetcher:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, *, request_name: str | None = None) -> bytes:
        """GET *url* and return the body.

        Raises:
            FetchError: On timeout, transport failure or a non-2xx status.
        """
        logger.debug("GET %s (request_name=%s)", url, request_name)
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise FetchError(url, f"timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(url, f"badge service returned {status}", status=status) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc
        return response.content
