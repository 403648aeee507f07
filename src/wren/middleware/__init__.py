"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(ctx: RequestContext, next: Next) -> Response

Built-in stages:
    LoggerMiddleware -- per-request logger
    AccessLogMiddleware -- one access-log record per request
    RequestFieldsMiddleware -- method/referer/request id/url/user agent on the logger
    SecurityHeadersMiddleware -- X-Frame-Options, X-Content-Type-Options, CSP
    NotFoundMiddleware -- custom 404 page for the fallback route
"""

from wren.middleware.chain import MiddlewareChain, build_chain
from wren.middleware.not_found import NotFoundMiddleware
from wren.middleware.protocol import Endpoint, Middleware, Next
from wren.middleware.request_logging import (
    AccessLogMiddleware,
    LoggerMiddleware,
    RequestFieldsMiddleware,
)
from wren.middleware.security_headers import (
    DEFAULT_SECURITY,
    SecurityConfig,
    SecurityHeadersMiddleware,
    XFrameOptions,
    security_headers,
)

__all__ = [
    "DEFAULT_SECURITY",
    "AccessLogMiddleware",
    "Endpoint",
    "LoggerMiddleware",
    "Middleware",
    "MiddlewareChain",
    "Next",
    "NotFoundMiddleware",
    "RequestFieldsMiddleware",
    "SecurityConfig",
    "SecurityHeadersMiddleware",
    "XFrameOptions",
    "build_chain",
    "security_headers",
]
