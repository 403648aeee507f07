"""CSRF protection — signed, time-limited tokens.

Tokens are random nonces signed with ``itsdangerous``, so no server-side
storage is needed: a token is valid if its signature checks out and it is
younger than ``max_age``. When CSRF is enabled the app puts one ``CSRF``
instance on every ``RequestContext``; handlers opt in per route::

    @app.route("/items", methods=["GET", "POST"])
    async def items(ctx: RequestContext) -> Response:
        if ctx.csrf is not None:
            await ctx.csrf.protect(ctx)
        ...

Pages composed through ``app.page()`` can call the ``csrf_field()`` template
global, which renders a hidden input with a fresh token::

    <form method="post">
        {{ csrf_field() }}
        ...
    </form>

With a standalone ``TemplateStore``, put ``ctx.csrf.field()`` on the page data
instead.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import TYPE_CHECKING

from itsdangerous import BadData, URLSafeTimedSerializer
from kida.utils.html import Markup

from wren.errors import ConfigurationError, HTTPError

if TYPE_CHECKING:
    from wren.context import RequestContext

# Methods that mutate state and need CSRF protection
_UNSAFE_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True, slots=True)
class CSRFConfig:
    """CSRF configuration.

    Attributes:
        field_name: Form field name for the token.
        header_name: HTTP header name for AJAX/htmx requests.
        token_length: Length of the random nonce in bytes.
        max_age: Seconds a token stays valid.
        exempt_paths: Paths that skip validation (e.g. webhooks).
    """

    field_name: str = "_csrf_token"
    header_name: str = "X-CSRF-Token"
    token_length: int = 32
    max_age: int = 12 * 3600
    exempt_paths: frozenset[str] = frozenset()


class CSRF:
    """Issue and check CSRF tokens."""

    __slots__ = ("config", "_serializer")

    def __init__(self, secret_key: str, config: CSRFConfig | None = None) -> None:
        if not secret_key:
            msg = "CSRF protection requires a non-empty secret_key."
            raise ConfigurationError(msg)
        self.config = config or CSRFConfig()
        self._serializer = URLSafeTimedSerializer(secret_key, salt="wren.csrf")

    def generate_token(self) -> str:
        return self._serializer.dumps(secrets.token_hex(self.config.token_length))

    def is_valid(self, token: str) -> bool:
        try:
            self._serializer.loads(token, max_age=self.config.max_age)
        except BadData:
            return False
        return True

    def field(self, token: str | None = None) -> Markup:
        """A hidden form input carrying *token* (a fresh one by default)."""
        token = token or self.generate_token()
        return Markup(
            f'<input type="hidden" name="{self.config.field_name}" value="{token}">'
        )

    async def protect(self, ctx: RequestContext) -> None:
        """Reject unsafe requests without a valid token.

        The token is read from the header first, then from a form body.
        Raises ``HTTPError(403)`` when it is missing or invalid.
        """
        request = ctx.request
        cfg = self.config
        if request.method not in _UNSAFE_METHODS or request.path in cfg.exempt_paths:
            return

        submitted = request.headers.get(cfg.header_name)
        if submitted is None and "form" in (request.content_type or ""):
            form = await request.form()
            submitted = form.get(cfg.field_name)

        if submitted is None:
            raise HTTPError(status=403, detail="CSRF token missing")
        if not self.is_valid(submitted):
            ctx.log.warning("rejected request with invalid CSRF token")
            raise HTTPError(status=403, detail="CSRF token invalid")
