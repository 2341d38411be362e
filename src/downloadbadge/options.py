"""Badge display options — normalization of untrusted query parameters.

Every accessor here is a pure function of the parameter mapping and
never raises: absent, blank or malformed values resolve to a documented
default so the badge always renders something well-formed.

``BadgeOptions`` gathers all of them once per request::

    options = BadgeOptions.from_params(QueryParams(b"style=social"), 1234)
    options.style   # "social"
    options.value   # "1,234"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote

from downloadbadge._internal.multimap import MultiValueMapping
from downloadbadge.formatting import (
    INVALID_COUNT,
    Count,
    CountFormatter,
    format_number_of_downloads,
    is_blank_count,
)

if TYPE_CHECKING:
    from downloadbadge.config import BadgeConfig

DEFAULT_STYLE = "flat"
DEFAULT_MAX_AGE = 2_592_000
DEFAULT_LABEL = "downloads"
DEFAULT_COLOR = "blue"
DEFAULT_EXTENSION = "svg"
INVALID_COLOR = "lightgrey"

AVAILABLE_EXTENSIONS = frozenset({"svg", "png", "jpg", "gif", "json"})

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _param(params: MultiValueMapping, key: str) -> str | None:
    """First value for *key* with surrounding whitespace removed, or None if blank."""
    value = params.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _lenient_int(value: str | None) -> int:
    """Leading integer of *value*, 0 when there is none. Never negative."""
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    if match is None:
        return 0
    return max(int(match.group(1)), 0)


def clean_image_label(text: str) -> str:
    """Escape *text* for one field of the ``label-value-color`` badge path.

    The renderer splits the path on single ``-`` and reads ``_`` as a
    space, so literal dashes and underscores are doubled. The result is
    then percent-encoded with no safe characters, which also covers
    ``/``, ``?``, ``#``, ``%`` and spaces.
    """
    escaped = text.strip().replace("-", "--").replace("_", "__")
    return quote(escaped, safe="")


def available_extension(extension: str) -> bool:
    """True if *extension* is one the badge service can render."""
    return extension.lower() in AVAILABLE_EXTENSIONS


def style_param(params: MultiValueMapping, default: str = DEFAULT_STYLE) -> str:
    return _param(params, "style") or default


def max_age_param(params: MultiValueMapping, default: int = DEFAULT_MAX_AGE) -> int:
    """``maxAge`` as a non-negative int; anything else is *default*."""
    max_age = params.get_int("maxAge")
    if max_age is None or max_age < 0:
        return default
    return max_age


def logo_param(params: MultiValueMapping) -> str:
    return _param(params, "logo") or ""


def logo_width(params: MultiValueMapping) -> int:
    return _lenient_int(_param(params, "logoWidth"))


def logo_padding(params: MultiValueMapping) -> int:
    return _lenient_int(_param(params, "logoPadding"))


def link_param(params: MultiValueMapping) -> tuple[str, ...]:
    """All ``link`` values, in order; used by social badges."""
    return tuple(params.get_list("link"))


def status_param(params: MultiValueMapping, default: str = DEFAULT_LABEL) -> str:
    """The badge label, sanitized for the URL path."""
    return clean_image_label(_param(params, "label") or default)


def image_extension(params: MultiValueMapping) -> str:
    value = _param(params, "extension")
    if value is not None and available_extension(value):
        return value.lower()
    return DEFAULT_EXTENSION


def image_colour(
    params: MultiValueMapping,
    count: Count,
    default: str = DEFAULT_COLOR,
) -> str:
    """Requested color, or *default*; always ``lightgrey`` without a count."""
    if is_blank_count(count):
        return INVALID_COLOR
    return _param(params, "color") or default


@dataclass(frozen=True, slots=True)
class BadgeOptions:
    """Normalized display options for one badge request.

    Computed once by ``from_params``; every field is final.

    Attributes:
        label: Sanitized label, ready for the URL path.
        value: Formatted download count, or ``"invalid"``.
        color: Badge color (``lightgrey`` when the count is absent).
        links: Raw ``link`` values, multiplicity preserved.
        request_name: Caller-supplied tag used when logging the fetch.
    """

    style: str
    max_age: int
    logo: str
    logo_width: int
    logo_padding: int
    label: str
    value: str
    color: str
    extension: str
    links: tuple[str, ...] = ()
    request_name: str | None = None

    @property
    def count_missing(self) -> bool:
        return self.value == INVALID_COUNT

    @classmethod
    def from_params(
        cls,
        params: MultiValueMapping,
        count: Count,
        *,
        config: BadgeConfig | None = None,
        formatter: CountFormatter | None = None,
    ) -> BadgeOptions:
        """Normalize *params* and *count* into a complete option set.

        Defaults for label, color, style and maxAge come from *config*
        when one is given. *formatter* replaces the built-in number
        formatter for present counts.
        """
        if config is None:
            style, max_age = DEFAULT_STYLE, DEFAULT_MAX_AGE
            label, color = DEFAULT_LABEL, DEFAULT_COLOR
        else:
            style, max_age = config.default_style, config.default_max_age
            label, color = config.default_label, config.default_color
        return cls(
            style=style_param(params, style),
            max_age=max_age_param(params, max_age),
            logo=logo_param(params),
            logo_width=logo_width(params),
            logo_padding=logo_padding(params),
            label=status_param(params, label),
            value=format_number_of_downloads(count, params, formatter=formatter),
            color=image_colour(params, count, color),
            extension=image_extension(params),
            links=link_param(params),
            request_name=_param(params, "request_name"),
        )
