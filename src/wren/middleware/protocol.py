"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(ctx: RequestContext, next: Next) -> Response: ...

No base class required. The framework checks the shape, not the lineage.
A middleware may pass a *new* context downstream (``ctx.replace(...)``)
and may return a transformed response (``response.with_header(...)``).
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from wren.context import RequestContext
from wren.http.response import Response

# The next stage in the chain, down to the route endpoint
type Next = Callable[[RequestContext], Awaitable[Response]]

# A fully wrapped route: the chain applied to an endpoint
type Endpoint = Callable[[RequestContext], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for wren middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(ctx: RequestContext, next: Next) -> Response:
            start = time.monotonic()
            response = await next(ctx)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RateLimiter:
            async def __call__(self, ctx: RequestContext, next: Next) -> Response:
                ...
    """

    async def __call__(self, ctx: RequestContext, next: Next) -> Response: ...
