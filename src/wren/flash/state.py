"""Per-request flash state.

One ``FlashState`` is created for every request. It holds the messages
attached to the request (decoded from the inbound cookie, or added by the
handler before a redirect) and the cookie directives queued for the
response.
"""

from dataclasses import dataclass, field

from wren.flash.codec import Flash, FlashCodec
from wren.http.cookies import SetCookie


@dataclass(slots=True)
class FlashState:
    codec: FlashCodec
    messages: list[Flash] = field(default_factory=list)
    cookies: list[SetCookie] = field(default_factory=list)
    # None until the inbound cookie has been checked for this request
    consumed: bool | None = None

    def add(self, kind: str, text: str) -> None:
        """Attach a message to be carried across the next redirect."""
        self.messages.append(Flash(kind=kind, text=text))
