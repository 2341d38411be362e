"""downloadbadge exception hierarchy.

Shared across the builder, fetcher, resolvers and app so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class BadgeError(Exception):
    """Base for all downloadbadge errors."""


class ConfigurationError(BadgeError):
    """Raised when configuration values are invalid.

    Typically raised by ``BadgeConfig.from_env()`` at startup.
    """


class FetchError(BadgeError):
    """Raised when the badge service cannot deliver an image.

    Transport failures, timeouts and non-2xx responses all collapse into
    this one kind. ``status`` is set only when a response was received.
    """

    def __init__(self, url: str, detail: str, *, status: int | None = None) -> None:
        self.url = url
        self.detail = detail
        self.status = status
        super().__init__(f"{url}: {detail}")


class ResolverError(BadgeError):
    """Raised when the upstream download count lookup fails."""


class BadgeStateError(BadgeError):
    """Raised when a single-use badge request or sink is reused."""


@dataclass(frozen=True, slots=True)
class HTTPError(BadgeError):
    """An error that maps directly to an HTTP status code.

    Raised while routing. The app catches these and turns them into
    plain-text responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — the path does not name a badge."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — badges are only served for GET and HEAD.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
