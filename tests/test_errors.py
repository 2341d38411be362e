"""Tests for downloadbadge.errors — exception hierarchy and messages."""

import pytest

from downloadbadge.errors import (
    BadgeError,
    BadgeStateError,
    ConfigurationError,
    FetchError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    ResolverError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ConfigurationError, FetchError, ResolverError, BadgeStateError, HTTPError],
    )
    def test_subclasses_badge_error(self, cls: type) -> None:
        assert issubclass(cls, BadgeError)

    def test_http_errors(self) -> None:
        assert issubclass(NotFound, HTTPError)
        assert issubclass(MethodNotAllowed, HTTPError)


class TestFetchError:
    def test_attributes(self) -> None:
        err = FetchError("https://x/badge", "badge service returned 503", status=503)
        assert err.url == "https://x/badge"
        assert err.status == 503
        assert str(err) == "https://x/badge: badge service returned 503"

    def test_status_optional(self) -> None:
        assert FetchError("u", "timed out").status is None


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request")) == "400: Bad request"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_not_found(self) -> None:
        err = NotFound()
        assert err.status == 404
        assert err.detail == "Not Found"

    def test_method_not_allowed(self) -> None:
        err = MethodNotAllowed(frozenset({"HEAD", "GET"}))
        assert err.status == 405
        assert err.headers == (("Allow", "GET, HEAD"),)
        assert "GET, HEAD" in err.detail

    def test_raisable(self) -> None:
        with pytest.raises(HTTPError) as info:
            raise NotFound("no such badge")
        assert info.value.detail == "no such badge"
