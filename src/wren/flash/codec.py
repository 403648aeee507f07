"""Flash value codec — a list of flash messages <-> one cookie value.

Values are JSON, signed with ``itsdangerous`` so a client cannot forge
messages that the app would render as its own. Decoding fails soft: a
tampered, truncated, or malformed value yields no messages.
"""

from dataclasses import dataclass
from typing import Any

from itsdangerous import BadData, URLSafeSerializer


@dataclass(frozen=True, slots=True)
class Flash:
    """A one-time notice shown on the next page view.

    ``kind`` is free-form (``"success"``, ``"error"``, ...) and is usually
    mapped to a CSS class by the template.
    """

    kind: str
    text: str


class FlashCodec:
    """Encode and decode flash sequences for the ``flash`` cookie."""

    __slots__ = ("_serializer",)

    def __init__(self, secret_key: str, *, salt: str = "wren.flash") -> None:
        self._serializer = URLSafeSerializer(secret_key, salt=salt)

    def encode(self, flashes: list[Flash]) -> str:
        return self._serializer.dumps([[f.kind, f.text] for f in flashes])

    def decode(self, value: str) -> list[Flash]:
        try:
            payload: Any = self._serializer.loads(value)
        except BadData:
            return []
        if not isinstance(payload, list):
            return []
        flashes: list[Flash] = []
        for item in payload:
            if (
                not isinstance(item, list)
                or len(item) != 2
                or not all(isinstance(part, str) for part in item)
            ):
                return []
            flashes.append(Flash(kind=item[0], text=item[1]))
        return flashes
