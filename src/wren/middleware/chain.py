"""Middleware chain — an immutable, ordered tuple of stages.

``build_chain`` produces the stages every route gets, in fixed order::

    LoggerMiddleware -> AccessLogMiddleware -> RequestFieldsMiddleware
        -> SecurityHeadersMiddleware -> [route-specific stages] -> endpoint

The first stage listed is the outermost. ``extend`` returns a new chain,
so the base chain can be shared by every route.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from wren.context import RequestContext
from wren.http.response import Response
from wren.middleware.protocol import Endpoint, Middleware
from wren.middleware.request_logging import (
    AccessLogMiddleware,
    LoggerMiddleware,
    RequestFieldsMiddleware,
)
from wren.middleware.security_headers import SecurityConfig, SecurityHeadersMiddleware


@dataclass(frozen=True, slots=True)
class MiddlewareChain:
    stages: tuple[Middleware, ...] = ()

    def extend(self, *stages: Middleware) -> MiddlewareChain:
        """A new chain with *stages* appended (innermost last)."""
        return MiddlewareChain((*self.stages, *stages))

    def wrap(self, endpoint: Endpoint) -> Endpoint:
        """Compose the chain around *endpoint*."""
        handler = endpoint
        for stage in reversed(self.stages):
            handler = _link(stage, handler)
        return handler


def _link(stage: Middleware, next_: Endpoint) -> Endpoint:
    async def call(ctx: RequestContext) -> Response:
        return await stage(ctx, next_)

    return call


def build_chain(
    logger: logging.Logger,
    security: SecurityConfig | None = None,
) -> MiddlewareChain:
    """The stages applied to every route, in their fixed order."""
    return MiddlewareChain(
        (
            LoggerMiddleware(logger),
            AccessLogMiddleware(),
            RequestFieldsMiddleware(),
            SecurityHeadersMiddleware(security),
        )
    )
