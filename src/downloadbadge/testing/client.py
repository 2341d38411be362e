"""Async test client for the badge app.

Uses the same Response type as production and sends requests through
the ASGI interface directly — no HTTP involved.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlencode

from downloadbadge._internal.asgi import Scope
from downloadbadge.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for ASGI badge apps.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/rails", query={"metric": "true"})
            assert response.status == 200
    """

    __slots__ = ("app",)

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        # Mirror lifespan shutdown: release the app's outbound clients.
        close = getattr(self.app, "aclose", None)
        if close is not None:
            await close()

    async def get(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        query: Mapping[str, str | Sequence[str]] | None = None,
    ) -> Response:
        """Send a GET request. List values in *query* repeat the key."""
        return await self.request("GET", path, headers=headers, query=query)

    async def head(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        query: Mapping[str, str | Sequence[str]] | None = None,
    ) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers, query=query)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        query: Mapping[str, str | Sequence[str]] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send an arbitrary request and collect the response."""
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part, query_string = path, ""
        if query:
            pairs: list[tuple[str, str]] = []
            for key, value in query.items():
                if isinstance(value, str):
                    pairs.append((key, value))
                else:
                    pairs.extend((key, item) for item in value)
            extra = urlencode(pairs)
            query_string = f"{query_string}&{extra}" if query_string else extra

        raw_headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ]
        scope: Scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method,
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body or b"", "more_body": False}
            return {"type": "http.disconnect"}

        status = 500
        response_headers: list[tuple[str, str]] = []
        body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
                response_headers.extend(
                    (name.decode("latin-1"), value.decode("latin-1"))
                    for name, value in message.get("headers", [])
                )
            elif message["type"] == "http.response.body":
                body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        content_type = "text/plain; charset=utf-8"
        other_headers: list[tuple[str, str]] = []
        for name, value in response_headers:
            if name == "content-type":
                content_type = value
            else:
                other_headers.append((name, value))
        return Response(
            body=b"".join(body_parts),
            status=status,
            content_type=content_type,
            headers=tuple(other_headers),
        )

