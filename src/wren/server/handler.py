"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, builds the request context, dispatches through
the router, and sends the Response back through ASGI send().

``make_endpoint`` adapts a user handler into an ``Endpoint``: it checks
the method, injects ``ctx`` / ``request`` by name or annotation, and
turns the return value (or a raised ``HTTPError``) into a ``Response``.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.context import Ambient, RequestContext
from wren.errors import ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Endpoint
from wren.routing.router import Router
from wren.server.errors import http_error_response, internal_error_response
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    ambient: Ambient,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    ctx = RequestContext.create(request, ambient)
    endpoint = router.resolve(request.path)

    try:
        response = await endpoint(ctx)
    except Exception:
        logger.exception("500 %s %s", request.method, request.path)
        response = internal_error_response()

    await send_response(response, send, head=request.method == "HEAD")


def make_endpoint(
    handler: Handler,
    methods: frozenset[str] | None = None,
    *,
    path: str | None = None,
    status: int | None = None,
) -> Endpoint:
    """Adapt *handler* into an endpoint.

    Args:
        handler: Sync or async callable taking ``ctx`` and/or ``request``.
        methods: Accepted methods; ``None`` accepts all. A mismatch
            answers 405 with an ``Allow`` header.
        path: The path the handler is registered at. A request for any
            other path (the root route serving as fallback) answers a
            method mismatch with 404 instead of 405.
        status: Status forced onto a 200 result (the 404 page uses this).

    Raises:
        ConfigurationError: If the handler asks for anything other than
            the context or the request.
    """
    injectors = _injectors(handler)

    async def endpoint(ctx: RequestContext) -> Response:
        if methods is not None and ctx.request.method not in methods:
            if path is not None and ctx.request.path != path:
                return http_error_response(NotFound())
            return http_error_response(MethodNotAllowed(methods))
        kwargs = {name: inject(ctx) for name, inject in injectors.items()}
        try:
            result = await invoke(handler, **kwargs)
        except HTTPError as exc:
            ctx.log.debug("%d %s", exc.status, exc.detail)
            return http_error_response(exc)
        response = to_response(result)
        if status is not None and response.status == 200:
            response = response.with_status(status)
        return response

    return endpoint


def to_response(result: Any) -> Response:
    """Convert a handler's return value into a Response."""
    if isinstance(result, Response):
        return result
    if isinstance(result, str):
        return Response(body=result)
    msg = (
        f"Handler returned {type(result).__name__}; "
        "expected a Response (see render/redirect) or a str."
    )
    raise TypeError(msg)


def _injectors(handler: Handler) -> dict[str, Callable[[RequestContext], Any]]:
    """Map each handler parameter to how its value is read from the context."""
    sig = inspect.signature(handler, eval_str=True)
    injectors: dict[str, Callable[[RequestContext], Any]] = {}

    for name, param in sig.parameters.items():
        if name == "ctx" or param.annotation is RequestContext:
            injectors[name] = _context
        elif name == "request" or param.annotation is Request:
            injectors[name] = _request
        elif param.default is inspect.Parameter.empty:
            msg = (
                f"Handler {getattr(handler, '__qualname__', handler)!r} has parameter "
                f"{name!r}; handlers may only take the request context ('ctx') "
                "or the request ('request')."
            )
            raise ConfigurationError(msg)

    return injectors


def _context(ctx: RequestContext) -> RequestContext:
    return ctx


def _request(ctx: RequestContext) -> Request:
    return ctx.request
