"""The flash cookie protocol.

A handler attaches messages and redirects; the redirect writes them into
the ``flash`` cookie. The next request that renders or redirects consumes
the cookie: it is decoded, handed to the page (render) or dropped
(redirect), and always deleted. Messages therefore live for exactly one
hop::

    POST /items        -> 303, Set-Cookie: flash=<encoded>; Path=/; Secure; SameSite=Strict
    GET  /items        -> 200 with the messages, Set-Cookie: flash=; Max-Age=-1
    GET  /items        -> 200, no messages
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from wren.flash.codec import Flash
from wren.http.cookies import SetCookie
from wren.http.response import Response

if TYPE_CHECKING:
    from wren.context import RequestContext

FLASH_COOKIE = "flash"


def _deletion_cookie() -> SetCookie:
    return SetCookie(
        name=FLASH_COOKIE,
        value="",
        max_age=-1,
        expires=datetime.now(timezone.utc) - timedelta(hours=1),
        path="/",
    )


def check_and_consume(ctx: RequestContext) -> bool:
    """Consume the inbound ``flash`` cookie, if any.

    Decodes the cookie into ``ctx.flash.messages`` and queues its
    deletion. Returns whether a cookie was present. Only the first call
    in a request does any work; later calls return the same answer.
    """
    state = ctx.flash
    if state.consumed is not None:
        return state.consumed

    value = ctx.request.cookies.get(FLASH_COOKIE)
    if value is None:
        state.consumed = False
        return False

    state.messages = state.codec.decode(value)
    state.cookies.append(_deletion_cookie())
    state.consumed = True
    return True


def set_if_needed(ctx: RequestContext, *, redirect: bool, flashes: list[Flash]) -> None:
    """Queue a new ``flash`` cookie when redirecting with messages.

    Nothing is written for direct renders, for requests that just consumed
    a cookie (re-issuing it would deliver the same messages twice), or
    when there are no messages.
    """
    consumed = check_and_consume(ctx)
    if not redirect or consumed:
        return
    if not flashes:
        return
    ctx.flash.cookies.append(
        SetCookie(
            name=FLASH_COOKIE,
            value=ctx.flash.codec.encode(flashes),
            path="/",
            secure=True,
            samesite="Strict",
        )
    )


def apply_flash_cookies(ctx: RequestContext, response: Response) -> Response:
    """Attach the queued flash cookie directives to *response*."""
    if not ctx.flash.cookies:
        return response
    return response.with_cookies(ctx.flash.cookies)
