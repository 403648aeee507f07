"""Request context — the explicit, per-request capability set.

Every handler and middleware receives a ``RequestContext``. It bundles the
request with the ambient values the app owns for its whole lifetime (time
zone, static asset directory, CSRF collaborator) and the request-scoped
logger and flash state::

    @app.route("/items")
    def items(ctx: RequestContext) -> Response:
        ctx.log.info("listing items")
        return render(ctx, items_page, ItemsData(now=ctx.now()))

The context is frozen. Middleware that enriches it returns a new one via
``ctx.replace(...)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from wren.errors import ConfigurationError
from wren.flash.codec import FlashCodec
from wren.flash.state import FlashState
from wren.http.request import Request
from wren.logs import RequestLogger, logger

if TYPE_CHECKING:
    from wren.security.csrf import CSRF

UTC: tzinfo = timezone.utc


def resolve_location(name: str | None) -> tzinfo:
    """Look up an IANA time zone, falling back to UTC when unset."""
    if not name:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"Unknown time zone {name!r}."
        raise ConfigurationError(msg) from exc


@dataclass(frozen=True, slots=True)
class Ambient:
    """App-owned values every request borrows. Built once at freeze."""

    codec: FlashCodec
    location: tzinfo = UTC
    static: Path | None = None
    csrf: CSRF | None = None


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Everything a handler may use for one request."""

    request: Request
    flash: FlashState
    log: RequestLogger = field(default_factory=lambda: RequestLogger(logger))
    location: tzinfo = UTC
    static: Path | None = None
    csrf: CSRF | None = None

    @classmethod
    def create(cls, request: Request, ambient: Ambient) -> RequestContext:
        return cls(
            request=request,
            flash=FlashState(ambient.codec),
            location=ambient.location,
            static=ambient.static,
            csrf=ambient.csrf,
        )

    def replace(self, **changes: Any) -> RequestContext:
        return replace(self, **changes)

    def now(self) -> datetime:
        """Current time in the app's time zone."""
        return datetime.now(self.location)
