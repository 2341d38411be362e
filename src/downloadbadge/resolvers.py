"""Download count resolvers.

A resolver turns the badge name from the path into a download count
before the badge request runs. ``None`` means the count is unknown and
the badge shows ``invalid``.

Two implementations:

- ``StaticCountResolver`` — counts from a mapping (tests, fixed demos)
- ``RubygemsCountResolver`` — the RubyGems.org API
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import httpx

from downloadbadge._internal.multimap import MultiValueMapping
from downloadbadge.config import BadgeConfig
from downloadbadge.errors import ResolverError
from downloadbadge.formatting import Count

logger = logging.getLogger("downloadbadge.resolvers")

_GEM_NAME = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


@runtime_checkable
class CountResolver(Protocol):
    """Looks up the download count for a badge name."""

    async def resolve(self, name: str, params: MultiValueMapping) -> Count: ...


class StaticCountResolver:
    """Resolves counts from a fixed mapping; unknown names resolve to None."""

    __slots__ = ("_counts",)

    def __init__(self, counts: Mapping[str, Count]) -> None:
        self._counts = dict(counts)

    async def resolve(self, name: str, params: MultiValueMapping) -> Count:
        return self._counts.get(name)


class RubygemsCountResolver:
    """Resolves gem download counts from the RubyGems.org API.

    ``type=total`` (default) reads the all-time count, ``type=latest``
    the count for the newest version. Unknown gems resolve to None;
    transport failures raise ``ResolverError``.
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

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.rubygems_url,
                timeout=httpx.Timeout(self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def resolve(self, name: str, params: MultiValueMapping) -> Count:
        if not _GEM_NAME.fullmatch(name):
            return None

        try:
            response = await self.client.get(f"/api/v1/gems/{name}.json")
        except httpx.HTTPError as exc:
            msg = f"rubygems lookup for {name!r} failed: {exc}"
            raise ResolverError(msg) from exc

        if response.status_code == 404:
            logger.debug("gem %s not found", name)
            return None
        if response.is_error:
            msg = f"rubygems returned {response.status_code} for {name!r}"
            raise ResolverError(msg)

        try:
            data: Any = response.json()
        except ValueError as exc:
            msg = f"rubygems returned invalid JSON for {name!r}"
            raise ResolverError(msg) from exc
        if not isinstance(data, dict):
            msg = f"rubygems returned {type(data).__name__} instead of an object for {name!r}"
            raise ResolverError(msg)

        kind = (params.get("type") or "total").strip().lower()
        key = "version_downloads" if kind == "latest" else "downloads"
        return data.get(key)
