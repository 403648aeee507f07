"""Rendering pages and redirecting, with flash messages.

``render`` and ``redirect`` are the two ways a handler finishes a request
that involves flash messages:

- ``render`` consumes any pending flash cookie and hands its messages to
  the page data, then renders the page.
- ``redirect`` writes the messages attached to the request into the flash
  cookie for the next request.

Usage::

    @app.route("/items", methods=["GET", "POST"])
    async def items(ctx: RequestContext) -> Response:
        if ctx.request.method == "POST":
            ctx.flash.add("success", "Saved")
            return redirect(ctx, "/items", 303)
        return render(ctx, items_page, ItemsData(items=load_items()))
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from wren.context import RequestContext
from wren.flash.codec import Flash
from wren.flash.cookie import apply_flash_cookies, check_and_consume, set_if_needed
from wren.http.response import Response, plain_text, redirect_response
from wren.templating.store import Page


@runtime_checkable
class RenderData(Protocol):
    """What every page's data object must support."""

    def set_flashes(self, flashes: Sequence[Flash]) -> None: ...


@dataclass(slots=True)
class ViewData:
    """Base for page data. Subclass it and add your fields::

        @dataclass(slots=True)
        class ItemsData(ViewData):
            items: list[Item] = field(default_factory=list)
    """

    title: str = ""
    flashes: list[Flash] = field(default_factory=list)

    def set_flashes(self, flashes: Sequence[Flash]) -> None:
        self.flashes = list(flashes)


def render(ctx: RequestContext, page: Page, data: RenderData, status: int = 200) -> Response:
    """Render *page* against *data* with the given status.

    A template error is logged and answered with a plain 500; nothing of
    the partially rendered page reaches the client.
    """
    log = ctx.log.child(code=status, template=page.name)

    # Only messages that arrived in the cookie are shown
    consumed = check_and_consume(ctx)
    flashes = list(ctx.flash.messages) if consumed else []
    set_if_needed(ctx, redirect=False, flashes=flashes)
    data.set_flashes(flashes)

    try:
        body = page.render(data)
    except Exception:
        log.exception("failed to execute template")
        return apply_flash_cookies(ctx, plain_text("Internal Server Error", 500))

    response = Response(body=body, status=status, content_type="text/html; charset=utf-8")
    return apply_flash_cookies(ctx, response)


def redirect(ctx: RequestContext, url: str, status: int = 302) -> Response:
    """Redirect to *url*, carrying the request's flash messages forward."""
    set_if_needed(ctx, redirect=True, flashes=list(ctx.flash.messages))
    return apply_flash_cookies(ctx, redirect_response(url, status))
