"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from wren.http.cookies import SetCookie


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status, headers, and cookies. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with *name* set to *value*.

        An existing header of the same name (case-insensitive) is replaced.
        """
        lowered = name.lower()
        kept = tuple((k, v) for k, v in self.headers if k.lower() != lowered)
        return replace(self, headers=(*kept, (name, value)))

    def with_headers(self, headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> Response:
        """Return a new Response with every header in *headers* set."""
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        response = self
        for name, value in pairs:
            response = response.with_header(name, value)
        return response

    def with_cookie(self, cookie: SetCookie) -> Response:
        """Return a new Response with an additional Set-Cookie."""
        return replace(self, cookies=(*self.cookies, cookie))

    def with_cookies(self, cookies: Iterable[SetCookie]) -> Response:
        return replace(self, cookies=(*self.cookies, *cookies))

    # -- Accessors --

    def header(self, name: str) -> str | None:
        """First value of header *name*, or None."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def cookie(self, name: str) -> SetCookie | None:
        """The last Set-Cookie directive for *name*, or None."""
        for cookie in reversed(self.cookies):
            if cookie.name == name:
                return cookie
        return None

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


def plain_text(body: str, status: int) -> Response:
    """A ``text/plain`` response that browsers must not sniff."""
    return Response(
        body=body,
        status=status,
        content_type="text/plain; charset=utf-8",
        headers=(("X-Content-Type-Options", "nosniff"),),
    )


def redirect_response(url: str, status: int = 302) -> Response:
    """A bare redirect. Use ``wren.templating.render.redirect`` to carry flash messages."""
    return Response(body="", status=status).with_header("Location", url)
