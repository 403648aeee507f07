"""Custom 404 fallback.

Installed only on the route that owns the not-found fallback (the root
route, or the default 404 endpoint when there is no root route).
"""

from wren.context import RequestContext
from wren.http.response import Response
from wren.middleware.protocol import Endpoint, Next


class NotFoundMiddleware:
    """Replace a 404 from downstream with the custom not-found endpoint.

    Any other outcome, other error statuses included, passes through
    unchanged.
    """

    __slots__ = ("handler",)

    def __init__(self, handler: Endpoint) -> None:
        self.handler = handler

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        response = await next(ctx)
        if response.status != 404:
            return response
        return await self.handler(ctx)
