"""Wren application class.

Mutable during setup (route registration, 404 handler, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import inspect
import secrets
import threading
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from kida.utils.html import Markup

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.types import Handler
from wren.config import AppConfig
from wren.context import Ambient, resolve_location
from wren.errors import ConfigurationError
from wren.flash.codec import FlashCodec
from wren.logs import logger, setup_logger
from wren.middleware.chain import MiddlewareChain, build_chain
from wren.middleware.not_found import NotFoundMiddleware
from wren.middleware.protocol import Endpoint
from wren.routing.route import Route, normalize_methods
from wren.routing.router import ROOT_PATH, Router, check_path
from wren.security.csrf import CSRF
from wren.server.errors import default_not_found
from wren.server.handler import handle_request, make_endpoint
from wren.server.static import StaticFiles
from wren.templating.store import Page, TemplateStore


class App:
    """The wren application.

    Mutable during setup (routes, 404 handler, hooks). Frozen at runtime
    when ``app.run()`` or ``__call__()`` is first invoked.

    Usage::

        app = App(AppConfig(secret_key="...", time_zone="Europe/Paris"))
        home = app.page("home.html")

        @app.route("/")
        def index(ctx: RequestContext) -> Response:
            return render(ctx, home, ViewData(title="Home"))

        @app.not_found
        def missing(ctx: RequestContext) -> Response:
            return render(ctx, not_found_page, ViewData(title="Not found"), 404)

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread compiles the app, even when several server threads call
        ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_ambient",
        "_freeze_lock",
        "_frozen",
        "_not_found",
        "_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "_templates",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        routes: Mapping[str, Handler] | None = None,
        not_found: Handler | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._routes: dict[str, Route] = {}
        self._not_found: Handler | None = not_found
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._templates: TemplateStore | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._ambient: Ambient | None = None

        for path, handler in (routes or {}).items():
            self.add_route(path, handler)

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: Exact URL path. ``/`` also receives every unmatched path.
            methods: HTTP methods. Defaults to all methods.

        Raises:
            ConfigurationError: If *path* is under ``/static/`` or already
                registered.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(path, func, methods=methods)
            return func

        return decorator

    def add_route(
        self,
        path: str,
        handler: Handler,
        *,
        methods: list[str] | None = None,
    ) -> None:
        """Register *handler* for *path*. See ``route``."""
        self._check_not_frozen()
        check_path(path)
        if path in self._routes:
            msg = f"Route path {path!r} is registered twice."
            raise ConfigurationError(msg)
        self._routes[path] = Route(path, handler, normalize_methods(methods))

    def not_found(self, func: Handler) -> Handler:
        """Register the custom 404 handler via decorator.

        It replaces every 404 produced by the fallback route: the root
        route when there is one, the built-in 404 otherwise. A handler
        returning a plain 200 response is answered with 404.
        """
        self._check_not_frozen()
        self._not_found = func
        return func

    # -- Templates --

    @property
    def templates(self) -> TemplateStore:
        """Template store over ``config.template_dir``.

        Templates get a ``csrf_field()`` global: a hidden input carrying a
        fresh CSRF token, or nothing when CSRF protection is disabled.
        """
        if self._templates is None:
            self._templates = TemplateStore(
                self.config.template_dir,
                autoescape=self.config.autoescape,
                globals_={"csrf_field": self._csrf_field},
            )
        return self._templates

    def page(self, name: str, base_name: str = "base.html") -> Page:
        """Compose *name* over *base_name* from the app's template store.

        Call at import time: a missing or broken template raises
        ``ConfigurationError`` before the app serves anything.
        """
        return self.templates.compose(name, base_name)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown,
        after the server stops accepting new requests.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with uvicorn.

        In-flight requests get ``config.shutdown_timeout`` seconds to finish
        once shutdown begins.
        """
        import uvicorn

        self._ensure_frozen()
        uvicorn.run(
            self,
            host=host or self.config.host,
            port=port or self.config.port,
            log_level=self.config.log_level,
            timeout_graceful_shutdown=self.config.shutdown_timeout,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None
        assert self._ambient is not None

        await handle_request(scope, receive, send, router=self._router, ambient=self._ambient)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), so a
        configuration error fails startup. Then runs registered
        startup/shutdown hooks and signals completion back to the server.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        result = hook()
                        if inspect.isawaitable(result):
                            await result
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    result = hook()
                    if inspect.isawaitable(result):
                        await result
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        logger = setup_logger(debug=self.config.debug, level=self.config.log_level)

        # 1. Ambient values every request borrows
        self._ambient = self._build_ambient()

        # 2. Middleware chain shared by every route
        chain = build_chain(logger, self.config.security)

        # 3. Route table; the fallback owner gets the 404 stage
        fallback = self._fallback_chain(chain)
        static = None
        if self._ambient.static is not None:
            static = chain.wrap(StaticFiles(self._ambient.static))

        router = Router(not_found=fallback.wrap(default_not_found), static=static)
        for route in self._routes.values():
            route_chain = fallback if route.path == ROOT_PATH else chain
            endpoint = make_endpoint(route.handler, route.methods, path=route.path)
            router.add(route.path, route_chain.wrap(endpoint))
        router.compile()
        self._router = router

        self._frozen = True

    def _fallback_chain(self, chain: MiddlewareChain) -> MiddlewareChain:
        if self._not_found is None:
            return chain
        handler: Endpoint = make_endpoint(self._not_found, status=404)
        return chain.extend(NotFoundMiddleware(handler))

    def _build_ambient(self) -> Ambient:
        config = self.config
        secret_key = config.secret_key
        if not secret_key:
            logger.warning("no secret_key configured; flash cookies will not survive a restart")
            secret_key = secrets.token_hex(32)

        csrf = None
        if config.csrf_enabled:
            csrf = CSRF(secret_key)
            logger.info("CSRF protection enabled")
        else:
            logger.warning("CSRF protection disabled")

        static = None
        if config.static_dir is not None and Path(config.static_dir).is_dir():
            static = Path(config.static_dir).resolve()

        return Ambient(
            codec=FlashCodec(secret_key),
            location=resolve_location(config.time_zone),
            static=static,
            csrf=csrf,
        )

    def _csrf_field(self) -> Markup:
        csrf = self._ambient.csrf if self._ambient is not None else None
        if csrf is None:
            return Markup("")
        return csrf.field()

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
