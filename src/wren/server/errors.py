"""HTTPError to Response mapping.

Errors become ordinary plain-text responses inside the endpoint, so they
travel back out through the middleware chain like any other response.
"""

import logging

from wren.context import RequestContext
from wren.errors import HTTPError, NotFound
from wren.http.response import Response, plain_text

logger = logging.getLogger("wren.server")


def http_error_response(exc: HTTPError) -> Response:
    """Plain-text response carrying the error's status, detail and headers."""
    detail = exc.detail or f"Error {exc.status}"
    return plain_text(detail, exc.status).with_headers(exc.headers)


async def default_not_found(ctx: RequestContext) -> Response:
    """Endpoint for paths no route claims."""
    ctx.log.debug("no route for path")
    return http_error_response(NotFound())


def internal_error_response() -> Response:
    """The generic 500. Never includes the error text."""
    return plain_text("Internal Server Error", 500)
