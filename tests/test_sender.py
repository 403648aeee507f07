"""Tests for wren.server.sender response emission rules."""

import logging

import pytest

from wren.http.cookies import SetCookie
from wren.http.response import Response
from wren.server.sender import body_size, send_response


class TestSendResponse:
    async def test_204_drops_body_and_sets_zero_content_length(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        response = Response("unexpected-body").with_status(204)
        await send_response(response, send)

        assert messages[0]["type"] == "http.response.start"
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_200_preserves_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("ok"), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"content-type"] == b"text/html; charset=utf-8"
        assert messages[1]["body"] == b"ok"

    async def test_head_keeps_length_drops_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("ok"), send, head=True)

        assert dict(messages[0]["headers"])[b"content-length"] == b"2"
        assert messages[1]["body"] == b""

    async def test_cookies_become_set_cookie_headers(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        response = Response("ok").with_cookie(SetCookie(name="a", value="1")).with_cookie(
            SetCookie(name="b", value="2")
        )
        await send_response(response, send)

        cookies = [v for k, v in messages[0]["headers"] if k == b"set-cookie"]
        assert cookies == [b"a=1; Path=/", b"b=2; Path=/"]

    async def test_body_write_failure_is_logged_not_raised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        statuses: list[int] = []

        async def send(message: dict) -> None:
            if message["type"] == "http.response.start":
                statuses.append(message["status"])
                return
            raise ConnectionResetError("client went away")

        with caplog.at_level(logging.ERROR, logger="wren.server"):
            await send_response(Response("ok"), send)

        assert statuses == [200]
        assert "failed to write response body" in caplog.text


class TestBodySize:
    def test_counts_body_bytes(self) -> None:
        assert body_size(Response("héllo")) == 6

    def test_head_sends_nothing(self) -> None:
        assert body_size(Response("hello"), head=True) == 0

    @pytest.mark.parametrize("status", [101, 204, 304])
    def test_bodyless_statuses(self, status: int) -> None:
        assert body_size(Response("hello").with_status(status)) == 0
