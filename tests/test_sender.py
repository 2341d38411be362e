"""Tests for downloadbadge.server.sender response emission rules."""

from downloadbadge.http.response import Response
from downloadbadge.server.sender import send_response


async def _collect(response: Response, **kwargs) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send, **kwargs)
    return messages


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages = await _collect(Response(b"<svg/>", content_type="image/svg+xml"))

        assert messages[0]["type"] == "http.response.start"
        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == b"image/svg+xml"
        assert headers[b"content-length"] == b"6"
        assert messages[1]["type"] == "http.response.body"
        assert messages[1]["body"] == b"<svg/>"

    async def test_headers_lowercased(self) -> None:
        messages = await _collect(Response("ok").with_cache(60))
        headers = dict(messages[0]["headers"])
        assert headers[b"cache-control"] == b"max-age=60"

    async def test_304_drops_body(self) -> None:
        messages = await _collect(Response("unexpected-body").with_status(304))
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_head_keeps_length_drops_body(self) -> None:
        messages = await _collect(Response("abcd"), head=True)
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"4"
        assert messages[1]["body"] == b""
