"""Badge URL assembly.

Builds the request for the external renderer::

    {base}/badge/{label}-{value}-{color}.{extension}?{query}

Only options that differ from the renderer's defaults end up in the
query, in a fixed order so the URL is deterministic.
"""

from urllib.parse import urlencode

from downloadbadge.options import (
    DEFAULT_MAX_AGE,
    DEFAULT_STYLE,
    BadgeOptions,
    clean_image_label,
)

DEFAULT_BASE_URL = "https://img.shields.io"
SOCIAL_STYLE = "social"


def style_additionals(options: BadgeOptions) -> str:
    """Encoded ``link`` pair for social badges, or ``""``.

    Social badges take exactly two links (left and right half). With
    fewer than two the fragment is left out rather than emitting a
    half-empty pair.
    """
    if options.style != SOCIAL_STYLE or len(options.links) < 2:
        return ""
    first, second = options.links[:2]
    return urlencode([("link", first), ("link", second)])


def additional_params(options: BadgeOptions) -> str:
    """The encoded query string for the badge request (may be empty)."""
    candidates: list[tuple[str, str | int]] = [
        ("logo", options.logo),
        ("logoWidth", options.logo_width),
        ("logoPadding", options.logo_padding),
        ("style", "" if options.style == DEFAULT_STYLE else options.style),
        ("maxAge", 0 if options.max_age == DEFAULT_MAX_AGE else options.max_age),
    ]
    query = urlencode([(key, value) for key, value in candidates if value])
    links = style_additionals(options)
    if query and links:
        return f"{query}&{links}"
    return query or links


def build_badge_url(
    options: BadgeOptions,
    base_url: str = DEFAULT_BASE_URL,
    *,
    extension: str | None = None,
) -> str:
    """Full renderer URL for *options*.

    *extension* overrides the requested one, e.g. to fetch the JSON
    variant of a badge.
    """
    value = clean_image_label(options.value)
    color = clean_image_label(options.color)
    ext = extension or options.extension
    return (
        f"{base_url.rstrip('/')}/badge/{options.label}-{value}-{color}.{ext}"
        f"?{additional_params(options)}"
    )
