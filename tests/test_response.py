"""Tests for wren.http.response — chainable, immutable Response."""

import pytest

from wren.http.cookies import SetCookie
from wren.http.response import Response, plain_text, redirect_response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response("hello")
        assert r.status == 200
        assert r.content_type == "text/html; charset=utf-8"
        assert r.headers == ()
        assert r.cookies == ()

    def test_with_status_returns_new_response(self) -> None:
        r = Response("x")
        r2 = r.with_status(404)
        assert r.status == 200
        assert r2.status == 404

    def test_with_header_replaces_case_insensitively(self) -> None:
        r = Response("x").with_header("X-Frame-Options", "DENY")
        r = r.with_header("x-frame-options", "SAMEORIGIN")

        assert r.headers == (("x-frame-options", "SAMEORIGIN"),)
        assert r.header("X-Frame-Options") == "SAMEORIGIN"

    def test_with_headers_mapping_and_pairs(self) -> None:
        r = Response("x").with_headers({"A": "1"}).with_headers([("B", "2")])
        assert r.header("a") == "1"
        assert r.header("b") == "2"

    def test_header_missing(self) -> None:
        assert Response("x").header("X-Missing") is None

    def test_cookie_returns_last_directive(self) -> None:
        r = Response("x").with_cookies(
            [SetCookie(name="flash", value="old"), SetCookie(name="flash", value="", max_age=-1)]
        )
        cookie = r.cookie("flash")
        assert cookie is not None
        assert cookie.is_deletion
        assert r.cookie("other") is None

    def test_body_bytes_and_text(self) -> None:
        assert Response("café").body_bytes == "café".encode()
        assert Response(b"abc").text == "abc"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response("x").status = 500  # type: ignore[misc]


class TestHelpers:
    def test_plain_text(self) -> None:
        r = plain_text("Internal Server Error", 500)
        assert r.status == 500
        assert r.content_type == "text/plain; charset=utf-8"
        assert r.header("X-Content-Type-Options") == "nosniff"
        assert r.text == "Internal Server Error"

    def test_redirect_response(self) -> None:
        r = redirect_response("/items", 303)
        assert r.status == 303
        assert r.header("Location") == "/items"
        assert r.body == ""

    def test_redirect_default_status(self) -> None:
        assert redirect_response("/").status == 302
