"""ASGI application serving download-count badges.

One route: ``GET /{name}``. The count for *name* comes from the
configured resolver, the badge from ``BadgeRequest``::

    app = BadgeApp(resolver=RubygemsCountResolver())

    # GET /rails?style=flat-square&metric=true
"""

from __future__ import annotations

import logging
from urllib.parse import unquote

from downloadbadge._internal.asgi import Receive, Scope, Send
from downloadbadge.badge import BadgeState, render_badge
from downloadbadge.config import BadgeConfig
from downloadbadge.errors import HTTPError, MethodNotAllowed, NotFound, ResolverError
from downloadbadge.fallback import FallbackRenderer, LocalBadgeRenderer
from downloadbadge.fetch import BadgeFetcher, Fetcher
from downloadbadge.formatting import Count, CountFormatter
from downloadbadge.http.query import QueryParams
from downloadbadge.http.response import Response
from downloadbadge.resolvers import CountResolver
from downloadbadge.server.sender import send_response
from downloadbadge.sink import BufferedSink

logger = logging.getLogger("downloadbadge.server")

ALLOWED_METHODS = frozenset({"GET", "HEAD"})

CONTENT_TYPES: dict[str, str] = {
    "svg": "image/svg+xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "gif": "image/gif",
    "json": "application/json",
}


class BadgeApp:
    """The badge service as an ASGI 3.0 application.

    Collaborators are injected; only the resolver is required. A
    ``BadgeFetcher`` is created from *config* when no fetcher is given
    and closed on lifespan shutdown.
    """

    __slots__ = ("_fallback", "_fetcher", "_formatter", "_owns_fetcher", "config", "resolver")

    def __init__(
        self,
        config: BadgeConfig | None = None,
        *,
        resolver: CountResolver,
        fetcher: Fetcher | None = None,
        fallback: FallbackRenderer | None = None,
        formatter: CountFormatter | None = None,
    ) -> None:
        self.config: BadgeConfig = config or BadgeConfig()
        self.resolver = resolver
        self._owns_fetcher = fetcher is None
        self._fetcher: Fetcher = fetcher or BadgeFetcher(self.config)
        self._fallback: FallbackRenderer = fallback or LocalBadgeRenderer()
        self._formatter = formatter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        method = scope["method"]
        params = QueryParams(scope.get("query_string", b""))
        try:
            response = await self.handle(method, scope["path"], params)
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, method, scope["path"], exc.detail)
            response = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
            for name, value in exc.headers:
                response = response.with_header(name, value)
        except Exception:
            logger.exception("500 %s %s", method, scope["path"])
            response = Response(body="Internal Server Error", status=500)

        await send_response(response, send, head=method == "HEAD")

    async def handle(self, method: str, path: str, params: QueryParams) -> Response:
        """Serve one badge request.

        Raises:
            NotFound: If *path* is not ``/{name}``.
            MethodNotAllowed: For anything but GET and HEAD.
        """
        name = self._match(method, path)
        count = await self._resolve(name, params)

        sink = BufferedSink()
        badge = await render_badge(
            params,
            sink,
            count,
            fetcher=self._fetcher,
            fallback=self._fallback,
            config=self.config,
            formatter=self._formatter,
        )

        options = badge.options
        if badge.state is BadgeState.DELIVERED:
            content_type = CONTENT_TYPES[options.extension]
        else:
            content_type = self._fallback.content_type(options)
        return Response(body=sink.getvalue(), content_type=content_type).with_cache(
            options.max_age
        )

    def _match(self, method: str, path: str) -> str:
        name = unquote(path).strip("/")
        if not name or "/" in name:
            raise NotFound
        if method not in ALLOWED_METHODS:
            raise MethodNotAllowed(ALLOWED_METHODS)
        return name

    async def _resolve(self, name: str, params: QueryParams) -> Count:
        try:
            return await self.resolver.resolve(name, params)
        except ResolverError as exc:
            logger.warning("count lookup for %s failed: %s", name, exc)
            return None

    async def aclose(self) -> None:
        """Release the fetcher and resolver connections this app created."""
        if self._owns_fetcher and isinstance(self._fetcher, BadgeFetcher):
            await self._fetcher.aclose()
        close = getattr(self.resolver, "aclose", None)
        if close is not None:
            await close()

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol; connections are closed at shutdown."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                try:
                    await self.aclose()
                except Exception as exc:
                    await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return
