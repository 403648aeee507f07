"""Exact-path route table.

Paths are matched verbatim: no parameters, no patterns. Two paths are
special:

- ``/static/`` is reserved for asset serving. Any request under it goes to
  the static endpoint and no route may be registered there.
- ``/`` doubles as the fallback for every path without an exact match,
  the way a conventional mux lets the root own the whole tree. Without a
  root route, unmatched paths go to the not-found endpoint.
"""

from wren.errors import ConfigurationError
from wren.middleware.protocol import Endpoint

STATIC_PREFIX = "/static/"
ROOT_PATH = "/"


def check_path(path: str) -> None:
    """Raise ``ConfigurationError`` if *path* cannot be registered."""
    if not path.startswith("/"):
        msg = f"Route path {path!r} must start with '/'."
        raise ConfigurationError(msg)
    if path.startswith(STATIC_PREFIX):
        msg = f"Route path {path!r} is reserved for static assets ({STATIC_PREFIX})."
        raise ConfigurationError(msg)


class Router:
    """Compiled exact-path router.

    Usage::

        router = Router(not_found=not_found_endpoint)
        router.add("/", index_endpoint)
        router.add("/items", items_endpoint)
        router.compile()
        endpoint = router.resolve("/items")
    """

    __slots__ = ("_compiled", "_not_found", "_routes", "_static")

    def __init__(self, not_found: Endpoint, static: Endpoint | None = None) -> None:
        self._routes: dict[str, Endpoint] = {}
        self._not_found = not_found
        self._static = static
        self._compiled = False

    def add(self, path: str, endpoint: Endpoint) -> None:
        """Add an endpoint for *path*. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        check_path(path)
        if path in self._routes:
            msg = f"Route path {path!r} is registered twice."
            raise ConfigurationError(msg)
        self._routes[path] = endpoint

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def resolve(self, path: str) -> Endpoint:
        """The endpoint that handles *path*. Never fails."""
        endpoint = self._routes.get(path)
        if endpoint is not None:
            return endpoint
        if self._static is not None and path.startswith(STATIC_PREFIX):
            return self._static
        return self._routes.get(ROOT_PATH, self._not_found)
