"""Request logging stages.

Three stages, always installed in this order at the top of every chain:

1. ``LoggerMiddleware`` — gives the request its own ``RequestLogger``.
2. ``AccessLogMiddleware`` — one record per request, after the handler.
3. ``RequestFieldsMiddleware`` — binds method, referer, request id, url and
   user agent onto that logger.

Because stage 3 binds onto the same per-request logger, the access-log
record written by stage 2 carries those fields too.
"""

import logging
import time
import uuid

from wren.context import RequestContext
from wren.http.response import Response
from wren.logs import RequestLogger
from wren.middleware.protocol import Next
from wren.server.sender import body_size

REQUEST_ID_HEADER = "X-Request-ID"


class LoggerMiddleware:
    """Attach a fresh ``RequestLogger`` derived from the base logger."""

    __slots__ = ("logger",)

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        return await next(ctx.replace(log=RequestLogger(self.logger)))


class AccessLogMiddleware:
    """Write one access-log record after the downstream chain completes.

    Records ``method``, ``url``, ``status``, ``size`` and ``duration`` (ms).
    ``size`` counts the body bytes actually sent: none for HEAD or for
    statuses that carry no body.
    An exception escaping the handler is logged as status 500 and re-raised;
    turning it into a response is the server boundary's job.
    """

    __slots__ = ()

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        start = time.perf_counter()
        status = 500
        size = 0
        try:
            response = await next(ctx)
            status = response.status
            size = body_size(response, head=ctx.request.method == "HEAD")
            return response
        finally:
            ctx.log.info(
                "request",
                extra={
                    "method": ctx.request.method,
                    "url": ctx.request.url,
                    "status": status,
                    "size": size,
                    "duration": round((time.perf_counter() - start) * 1000, 3),
                },
            )


class RequestFieldsMiddleware:
    """Bind request metadata onto the request logger.

    The request id comes from the ``X-Request-ID`` header when the client
    (or a proxy) sent one, and is generated otherwise.
    """

    __slots__ = ("header",)

    def __init__(self, header: str = REQUEST_ID_HEADER) -> None:
        self.header = header

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        request = ctx.request
        ctx.log.bind(
            method=request.method,
            referer=request.referer,
            request_id=request.headers.get(self.header) or uuid.uuid4().hex,
            url=request.url,
            user_agent=request.user_agent,
        )
        return await next(ctx)
