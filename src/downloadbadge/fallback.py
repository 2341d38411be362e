"""Local badge rendering, used when the badge service is unreachable.

Produces a shields-compatible flat SVG (or the JSON description of the
badge for ``.json`` requests) from the already-normalized options, so a
failed upstream call still yields a valid image.
"""

import json
import math
import re
from typing import Protocol, runtime_checkable
from urllib.parse import unquote

from downloadbadge.options import BadgeOptions

SVG_CONTENT_TYPE = "image/svg+xml"
JSON_CONTENT_TYPE = "application/json"

# Named colors understood by the badge service
NAMED_COLORS: dict[str, str] = {
    "brightgreen": "#4c1",
    "green": "#97ca00",
    "yellowgreen": "#a4a61d",
    "yellow": "#dfb317",
    "orange": "#fe7d37",
    "red": "#e05d44",
    "blue": "#007ec6",
    "grey": "#555",
    "gray": "#555",
    "lightgrey": "#9f9f9f",
    "lightgray": "#9f9f9f",
    "success": "#4c1",
    "important": "#fe7d37",
    "critical": "#e05d44",
    "informational": "#007ec6",
    "inactive": "#9f9f9f",
}
LABEL_COLOR = "#555"

_HEX_COLOR = re.compile(r"#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")

# Verdana 11px approximation
CHAR_WIDTH = 6.5
PADDING = 10

SVG_FLAT_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="20" role="img" aria-label="{label}: {value}">
  <title>{label}: {value}</title>
  <linearGradient id="s" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
    <stop offset="1" stop-opacity=".1"/>
  </linearGradient>
  <clipPath id="r">
    <rect width="{total_width}" height="20" rx="{radius}" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#r)">
    <rect width="{label_width}" height="20" fill="{label_color}"/>
    <rect x="{label_width}" width="{value_width}" height="20" fill="{color}"/>
    <rect width="{total_width}" height="20" fill="{overlay}"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" text-rendering="geometricPrecision" font-size="11">
    <text x="{label_x}" y="15" fill="#010101" fill-opacity=".3">{label}</text>
    <text x="{label_x}" y="14">{label}</text>
    <text x="{value_x}" y="15" fill="#010101" fill-opacity=".3">{value}</text>
    <text x="{value_x}" y="14">{value}</text>
  </g>
</svg>"""


@runtime_checkable
class FallbackRenderer(Protocol):
    """Renders a badge locally from normalized options."""

    def render_fallback_badge(self, options: BadgeOptions) -> bytes: ...
    def content_type(self, options: BadgeOptions) -> str: ...


def display_text(segment: str) -> str:
    """Undo ``clean_image_label`` to get the human-readable text back."""
    return unquote(segment).replace("--", "-").replace("__", "_")


def resolve_color(color: str) -> str:
    """Map a badge color name or hex code to an SVG fill.

    Unknown values fall back to light grey so arbitrary input never
    reaches the SVG markup.
    """
    text = display_text(color).strip().lower()
    if text in NAMED_COLORS:
        return NAMED_COLORS[text]
    match = _HEX_COLOR.fullmatch(text)
    if match:
        return f"#{match.group(1)}"
    return NAMED_COLORS["lightgrey"]


def _escape_xml(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _text_width(text: str) -> int:
    return math.ceil(len(text) * CHAR_WIDTH) + PADDING * 2


def render_svg(label: str, value: str, color: str, *, style: str = "flat") -> str:
    """Render a two-part badge.

    ``flat-square`` drops the rounding and gradient; every other style,
    ``social`` included, is drawn flat.
    """
    label_width = _text_width(label)
    value_width = _text_width(value)
    square = style == "flat-square"
    return SVG_FLAT_TEMPLATE.format(
        total_width=label_width + value_width,
        label_width=label_width,
        value_width=value_width,
        label_x=label_width / 2,
        value_x=label_width + value_width / 2,
        label=_escape_xml(label),
        value=_escape_xml(value),
        label_color=LABEL_COLOR,
        color=color,
        radius=0 if square else 3,
        overlay="none" if square else "url(#s)",
    )


class LocalBadgeRenderer:
    """Default fallback renderer.

    SVG for every image extension (raster formats are not rendered
    locally), the renderer's JSON shape for ``json``.
    """

    __slots__ = ()

    def content_type(self, options: BadgeOptions) -> str:
        return JSON_CONTENT_TYPE if options.extension == "json" else SVG_CONTENT_TYPE

    def render_fallback_badge(self, options: BadgeOptions) -> bytes:
        label = display_text(options.label)
        value = display_text(options.value)
        if options.extension == "json":
            payload = {
                "name": label,
                "value": value,
                "color": display_text(options.color),
                "label": label,
                "message": value,
            }
            return json.dumps(payload).encode("utf-8")
        svg = render_svg(label, value, resolve_color(options.color), style=options.style)
        return svg.encode("utf-8")
