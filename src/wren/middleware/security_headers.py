"""Security headers — X-Frame-Options, X-Content-Type-Options, Content-Security-Policy.

The policy is a pure function of a ``SecurityConfig``: it decides which
headers to send and never rejects a request. The middleware computes the
headers before calling the handler and stamps them on whatever response
comes back, error pages included.
"""

from dataclasses import dataclass
from enum import StrEnum

from wren.context import RequestContext
from wren.http.response import Response
from wren.middleware.protocol import Next


class XFrameOptions(StrEnum):
    DENY = "DENY"
    SAMEORIGIN = "SAMEORIGIN"


@dataclass(frozen=True, slots=True)
class SecurityConfig:
    """Which security headers to send. Each setting is independent.

    ``x_frame_options=None`` and an empty ``content_security_policy``
    mean the header is not sent at all.
    """

    x_frame_options: XFrameOptions | None = XFrameOptions.DENY
    no_sniff: bool = True
    content_security_policy: str | None = "default-src 'self'"


DEFAULT_SECURITY = SecurityConfig()


def security_headers(config: SecurityConfig | None = None) -> tuple[tuple[str, str], ...]:
    """Headers to set for *config* (``DEFAULT_SECURITY`` when None)."""
    config = config or DEFAULT_SECURITY
    headers: list[tuple[str, str]] = []
    if config.x_frame_options:
        headers.append(("X-Frame-Options", str(config.x_frame_options)))
    if config.no_sniff:
        headers.append(("X-Content-Type-Options", "nosniff"))
    if config.content_security_policy:
        headers.append(("Content-Security-Policy", config.content_security_policy))
    return tuple(headers)


class SecurityHeadersMiddleware:
    """Add the configured security headers to every response.

    Usage::

        from wren.middleware import SecurityConfig, SecurityHeadersMiddleware, XFrameOptions

        SecurityHeadersMiddleware(SecurityConfig(
            x_frame_options=XFrameOptions.SAMEORIGIN,
            content_security_policy=None,
        ))
    """

    __slots__ = ("config", "headers")

    def __init__(self, config: SecurityConfig | None = None) -> None:
        self.config = config or DEFAULT_SECURITY
        self.headers = security_headers(self.config)

    async def __call__(self, ctx: RequestContext, next: Next) -> Response:
        response = await next(ctx)
        # Headers the handler set itself take precedence
        for name, value in self.headers:
            if response.header(name) is None:
                response = response.with_header(name, value)
        return response
