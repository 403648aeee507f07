"""Static asset endpoint.

Serves files from ``AppConfig.static_dir`` for requests under
``/static/``. Runs behind the base middleware chain, so asset responses
get the same logging and security headers as pages.

Security: resolves symlinks and verifies the final path is within the
configured directory to prevent path traversal.
"""

import mimetypes
from pathlib import Path

from anyio import to_thread

from wren.context import RequestContext
from wren.errors import MethodNotAllowed, NotFound
from wren.http.response import Response, plain_text
from wren.routing.router import STATIC_PREFIX
from wren.server.errors import http_error_response


class StaticFiles:
    """Endpoint that serves files below a directory.

    Usage::

        endpoint = StaticFiles("./static")
        response = await endpoint(ctx)  # ctx.request.path == "/static/app.css"
    """

    __slots__ = ("_cache_control", "_directory", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = STATIC_PREFIX,
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._prefix = prefix
        self._cache_control = cache_control

    async def __call__(self, ctx: RequestContext) -> Response:
        request = ctx.request
        if request.method not in ("GET", "HEAD"):
            return http_error_response(MethodNotAllowed(frozenset({"GET", "HEAD"})))

        relative = request.path[len(self._prefix) :].lstrip("/")
        if not relative:
            return http_error_response(NotFound())

        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return plain_text("Forbidden", 403)
        if not file_path.is_file():
            return http_error_response(NotFound())

        return await self._serve_file(file_path)

    async def _serve_file(self, file_path: Path) -> Response:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        # File reads run in a worker thread; assets can be large.
        body = await to_thread.run_sync(file_path.read_bytes)
        return Response(
            body=body,
            content_type=content_type,
        ).with_header("Cache-Control", self._cache_control)
