"""ASGI response sending — translates wren Responses to ASGI messages."""

import logging

from wren._internal.asgi import Send
from wren.http.response import Response

logger = logging.getLogger("wren.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def body_size(response: Response, *, head: bool = False) -> int:
    """Number of body bytes written for *response*."""
    if head or not _body_allowed(response.status):
        return 0
    return len(response.body_bytes)


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a wren Response into ASGI send() calls.

    Once the start message is out the status is committed: a failure
    writing the body is logged and swallowed, since no other response can
    be sent in its place.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    raw_headers.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    try:
        await send(
            {
                "type": "http.response.body",
                "body": b"" if head else body,
            }
        )
    except OSError:
        logger.exception("failed to write response body (status %d)", response.status)
