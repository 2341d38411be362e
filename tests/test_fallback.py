"""Tests for downloadbadge.fallback — local badge rendering."""

import json

import pytest

from downloadbadge.fallback import (
    FallbackRenderer,
    LocalBadgeRenderer,
    display_text,
    render_svg,
    resolve_color,
)
from downloadbadge.http.query import QueryParams
from downloadbadge.options import BadgeOptions


def _options(query: bytes = b"", count: object = 1234) -> BadgeOptions:
    return BadgeOptions.from_params(QueryParams(query), count)  # type: ignore[arg-type]


class TestResolveColor:
    @pytest.mark.parametrize(
        ("color", "expected"),
        [
            ("blue", "#007ec6"),
            ("lightgrey", "#9f9f9f"),
            ("BrightGreen", "#4c1"),
            ("ff69b4", "#ff69b4"),
            ("%23abc", "#abc"),
        ],
    )
    def test_known(self, color: str, expected: str) -> None:
        assert resolve_color(color) == expected

    @pytest.mark.parametrize("color", ["nope", '"/><script>', "12345"])
    def test_unknown_is_lightgrey(self, color: str) -> None:
        assert resolve_color(color) == "#9f9f9f"


class TestDisplayText:
    def test_reverses_label_cleaning(self) -> None:
        assert display_text("my--gem__dl%2Fx") == "my-gem_dl/x"


class TestRenderSvg:
    def test_contains_texts_and_color(self) -> None:
        svg = render_svg("downloads", "1,234", "#007ec6")
        assert svg.startswith("<svg")
        assert ">downloads</text>" in svg
        assert ">1,234</text>" in svg
        assert 'fill="#007ec6"' in svg
        assert 'rx="3"' in svg

    def test_escapes_markup(self) -> None:
        svg = render_svg("<b>", "a&b", "#555")
        assert "<b>" not in svg
        assert "&lt;b&gt;" in svg
        assert "a&amp;b" in svg

    def test_flat_square(self) -> None:
        svg = render_svg("a", "b", "#555", style="flat-square")
        assert 'rx="0"' in svg
        assert 'fill="none"' in svg


class TestLocalBadgeRenderer:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(LocalBadgeRenderer(), FallbackRenderer)

    def test_svg(self) -> None:
        renderer = LocalBadgeRenderer()
        options = _options(b"label=total-downloads&color=red")
        body = renderer.render_fallback_badge(options).decode("utf-8")
        assert ">total-downloads</text>" in body
        assert ">1,234</text>" in body
        assert 'fill="#e05d44"' in body
        assert renderer.content_type(options) == "image/svg+xml"

    @pytest.mark.parametrize("style", ["social", "plastic", "for-the-badge"])
    def test_other_styles_drawn_flat(self, style: str) -> None:
        body = LocalBadgeRenderer().render_fallback_badge(_options(f"style={style}".encode()))
        assert 'rx="3"' in body.decode()
        assert 'fill="url(#s)"' in body.decode()

    def test_raster_extension_still_svg(self) -> None:
        renderer = LocalBadgeRenderer()
        options = _options(b"extension=png")
        assert renderer.render_fallback_badge(options).startswith(b"<svg")
        assert renderer.content_type(options) == "image/svg+xml"

    def test_json(self) -> None:
        renderer = LocalBadgeRenderer()
        options = _options(b"extension=json", count=None)
        payload = json.loads(renderer.render_fallback_badge(options))
        assert payload["name"] == "downloads"
        assert payload["value"] == "invalid"
        assert payload["color"] == "lightgrey"
        assert renderer.content_type(options) == "application/json"
