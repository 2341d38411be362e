"""Output sinks — where a rendered badge ends up.

A sink receives exactly one payload per request: either the badge
service's response or the local fallback, never both.
"""

from typing import Protocol, runtime_checkable

from downloadbadge.errors import BadgeStateError


@runtime_checkable
class OutputSink(Protocol):
    """Append-only destination for badge bytes."""

    def write(self, data: bytes | str) -> None: ...


class BufferedSink:
    """Write-once in-memory sink.

    The app turns its contents into the HTTP response body once the
    badge request has finished.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: bytes | None = None

    def write(self, data: bytes | str) -> None:
        if self._data is not None:
            msg = "BufferedSink already holds a badge"
            raise BadgeStateError(msg)
        self._data = data.encode("utf-8") if isinstance(data, str) else bytes(data)

    @property
    def written(self) -> bool:
        return self._data is not None

    def getvalue(self) -> bytes:
        return self._data or b""
