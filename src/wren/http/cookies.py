"""Cookie parsing and SetCookie serialization.

Consolidates the read side (parse_cookies, used by Request) and the
write side (SetCookie, used by Response) in one module.
"""

from dataclasses import dataclass
from datetime import datetime
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Returns an empty dict for empty or missing headers.
    """
    if not header:
        return {}
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        pair = pair.strip()
        if "=" in pair:
            key, _, value = pair.partition("=")
            cookies[key.strip()] = value.strip()
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a Response.

    ``max_age`` below zero together with an ``expires`` in the past is the
    portable way to tell a browser to drop a cookie.
    """

    name: str
    value: str
    max_age: int | None = None
    expires: datetime | None = None
    path: str | None = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = False
    samesite: str | None = None

    @property
    def is_deletion(self) -> bool:
        return self.max_age is not None and self.max_age < 0

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={self.value}"]
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.expires is not None:
            parts.append(f"Expires={format_datetime(self.expires, usegmt=True)}")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.httponly:
            parts.append("HttpOnly")
        if self.secure:
            parts.append("Secure")
        if self.samesite:
            parts.append(f"SameSite={self.samesite}")
        return "; ".join(parts)


def parse_set_cookie(header: str) -> SetCookie:
    """Parse a ``Set-Cookie`` header value back into a ``SetCookie``.

    Unknown attributes are ignored. Used by the test client to read the
    cookies a response set.
    """
    first, *attributes = (part.strip() for part in header.split(";"))
    name, _, value = first.partition("=")
    fields: dict[str, Any] = {"path": None}
    for attribute in attributes:
        key, _, attr_value = attribute.partition("=")
        key = key.strip().lower()
        if key == "path":
            fields["path"] = attr_value
        elif key == "domain":
            fields["domain"] = attr_value
        elif key == "max-age":
            fields["max_age"] = int(attr_value)
        elif key == "expires":
            fields["expires"] = parsedate_to_datetime(attr_value)
        elif key == "secure":
            fields["secure"] = True
        elif key == "httponly":
            fields["httponly"] = True
        elif key == "samesite":
            fields["samesite"] = attr_value
    return SetCookie(name=name.strip(), value=value.strip(), **fields)
