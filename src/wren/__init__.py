"""Wren — a small request-handling layer for server-rendered HTML.

Exact-path routing, a fixed middleware chain (request logging, security
headers, custom 404), one-hop flash messages in a signed cookie, and
base + child page templates.

Basic usage::

    from wren import App, AppConfig, RequestContext, ViewData, redirect, render

    app = App(AppConfig(secret_key="change-me"))
    items_page = app.page("items.html")

    @app.route("/items", methods=["GET", "POST"])
    async def items(ctx: RequestContext):
        if ctx.request.method == "POST":
            ctx.flash.add("success", "Saved")
            return redirect(ctx, "/items", 303)
        return render(ctx, items_page, ViewData(title="Items"))

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Flash",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Page",
    "RenderData",
    "Request",
    "RequestContext",
    "Response",
    "SecurityConfig",
    "TemplateStore",
    "ViewData",
    "WrenError",
    "XFrameOptions",
    "redirect",
    "render",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "RequestContext":
        from wren.context import RequestContext

        return RequestContext

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name == "Flash":
        from wren.flash.codec import Flash

        return Flash

    if name in ("Page", "TemplateStore"):
        from wren.templating import store as _store

        return getattr(_store, name)

    if name in ("RenderData", "ViewData", "redirect", "render"):
        from wren.templating import render as _render

        return getattr(_render, name)

    if name in ("SecurityConfig", "XFrameOptions"):
        from wren.middleware import security_headers as _security

        return getattr(_security, name)

    if name in ("Middleware", "Next"):
        from wren.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("WrenError", "ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
