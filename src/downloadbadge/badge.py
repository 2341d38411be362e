"""Badge request — one inbound badge, end to end.

Normalizes the parameters, builds the renderer URL, fetches it once and
writes exactly one payload to the output sink: the fetched body on
success, a locally rendered badge on failure.

State machine::

    IDLE → REQUESTING → DELIVERED
                      → FAILED → FALLBACK_DELIVERED

Instances are single-use. Fetch failures never propagate past
``dispatch()``.
"""

from __future__ import annotations

import logging
from enum import Enum

from downloadbadge._internal.multimap import MultiValueMapping
from downloadbadge.config import BadgeConfig
from downloadbadge.errors import BadgeStateError, FetchError
from downloadbadge.fallback import FallbackRenderer, LocalBadgeRenderer
from downloadbadge.fetch import Fetcher
from downloadbadge.formatting import Count, CountFormatter
from downloadbadge.options import BadgeOptions
from downloadbadge.sink import OutputSink
from downloadbadge.urls import additional_params, build_badge_url, style_additionals

logger = logging.getLogger("downloadbadge.badge")


class BadgeState(Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    DELIVERED = "delivered"
    FAILED = "failed"
    FALLBACK_DELIVERED = "fallback_delivered"

    @property
    def terminal(self) -> bool:
        return self in (BadgeState.DELIVERED, BadgeState.FALLBACK_DELIVERED)


class BadgeRequest:
    """A single download-count badge request.

    Options are normalized once in the initializer; the accessors below
    only read them back, so repeated calls return identical values and
    the parameters are never touched again.

    Args:
        params: Request parameters (``get_list`` is used for ``link``).
        sink: Receives the final badge bytes.
        count: Download count resolved upstream; None when unknown.
        fetcher: Performs the outbound request.
        fallback: Renders the badge locally when the fetch fails.
        config: Base URL and display defaults.
        formatter: Replaces the built-in number formatter.
    """

    __slots__ = (
        "_fallback",
        "_fetcher",
        "config",
        "count",
        "error",
        "options",
        "params",
        "sink",
        "state",
    )

    def __init__(
        self,
        params: MultiValueMapping,
        sink: OutputSink,
        count: Count,
        *,
        fetcher: Fetcher,
        fallback: FallbackRenderer | None = None,
        config: BadgeConfig | None = None,
        formatter: CountFormatter | None = None,
    ) -> None:
        self.params = params
        self.sink = sink
        self.count = count
        self.config = config or BadgeConfig()
        self._fetcher = fetcher
        self._fallback = fallback or LocalBadgeRenderer()
        self.options = BadgeOptions.from_params(
            params, count, config=self.config, formatter=formatter
        )
        self.state = BadgeState.IDLE
        self.error: FetchError | None = None

    def __repr__(self) -> str:
        return f"<BadgeRequest {self.state.value} {self.build_badge_url()!r}>"

    # -- Accessors --

    @property
    def style_param(self) -> str:
        return self.options.style

    @property
    def max_age_param(self) -> int:
        return self.options.max_age

    @property
    def logo_param(self) -> str:
        return self.options.logo

    @property
    def logo_width(self) -> int:
        return self.options.logo_width

    @property
    def logo_padding(self) -> int:
        return self.options.logo_padding

    @property
    def link_param(self) -> tuple[str, ...]:
        return self.options.links

    @property
    def status_param(self) -> str:
        return self.options.label

    @property
    def image_extension(self) -> str:
        return self.options.extension

    @property
    def image_colour(self) -> str:
        return self.options.color

    @property
    def format_number_of_downloads(self) -> str:
        return self.options.value

    @property
    def style_additionals(self) -> str:
        return style_additionals(self.options)

    @property
    def additional_params(self) -> str:
        return additional_params(self.options)

    def build_badge_url(self, extension: str | None = None) -> str:
        return build_badge_url(self.options, self.config.base_url, extension=extension)

    # -- Dispatch --

    async def dispatch(self) -> BadgeState:
        """Fetch the badge and write it (or the fallback) to the sink.

        Returns the terminal state reached. Only ``FetchError`` triggers
        the fallback; any other exception from the fetcher propagates and
        leaves the request in ``REQUESTING`` with nothing written.

        Raises:
            BadgeStateError: If this request was already dispatched.
        """
        if self.state is not BadgeState.IDLE:
            msg = f"badge request already {self.state.value}"
            raise BadgeStateError(msg)

        self.state = BadgeState.REQUESTING
        url = self.build_badge_url()
        try:
            body = await self._fetcher.fetch(url, request_name=self.options.request_name)
        except FetchError as exc:
            self.state = BadgeState.FAILED
            self.error = exc
            logger.warning("badge fetch failed, rendering fallback: %s", exc)
            self.sink.write(self._fallback.render_fallback_badge(self.options))
            self.state = BadgeState.FALLBACK_DELIVERED
        else:
            self.sink.write(body)
            self.state = BadgeState.DELIVERED
        return self.state


async def render_badge(
    params: MultiValueMapping,
    sink: OutputSink,
    count: Count,
    *,
    fetcher: Fetcher,
    fallback: FallbackRenderer | None = None,
    config: BadgeConfig | None = None,
    formatter: CountFormatter | None = None,
) -> BadgeRequest:
    """Create a ``BadgeRequest`` and dispatch it immediately.

    Returns the finished request so callers can inspect its state and
    options.
    """
    request = BadgeRequest(
        params,
        sink,
        count,
        fetcher=fetcher,
        fallback=fallback,
        config=config,
        formatter=formatter,
    )
    await request.dispatch()
    return request
