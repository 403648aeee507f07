"""Request-scoped logging on top of the standard ``logging`` module.

A ``RequestLogger`` is a ``LoggerAdapter`` that carries key/value fields
for one request (method, request id, url, ...). Every record it emits has
those fields under ``record.fields``; ``FieldFormatter`` renders them as
``key=value`` pairs after the message.

Usage::

    log = RequestLogger(logging.getLogger("wren.app"), {"request_id": "abc"})
    log.info("saved item", extra={"item": 42})
    # ... saved item request_id=abc item=42
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

logger = logging.getLogger("wren")


class RequestLogger(logging.LoggerAdapter):
    """Logger adapter holding per-request fields.

    ``bind()`` adds fields in place: the adapter belongs to a single
    request, and every stage holding it (including the access log,
    which runs outermost) sees fields bound further down the chain.
    """

    def __init__(self, logger: logging.Logger, fields: Mapping[str, Any] | None = None) -> None:
        super().__init__(logger, dict(fields or {}))

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self.extra or {})

    def bind(self, **fields: Any) -> RequestLogger:
        self.extra.update(fields)  # type: ignore[union-attr]
        return self

    def child(self, **fields: Any) -> RequestLogger:
        """A new adapter with this adapter's fields plus *fields*."""
        return RequestLogger(self.logger, {**self.fields, **fields})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        fields = self.fields
        fields.update(kwargs.pop("extra", None) or {})
        kwargs["extra"] = {"fields": fields}
        return msg, kwargs


def _format_value(value: Any) -> str:
    text = str(value)
    if not text or any(ch.isspace() for ch in text) or '"' in text:
        return '"' + text.replace('"', '\\"') + '"'
    return text


class FieldFormatter(logging.Formatter):
    """Append ``key=value`` pairs from ``record.fields`` to the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "fields", None)
        if not fields:
            return line
        pairs = " ".join(f"{key}={_format_value(value)}" for key, value in fields.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


def setup_logger(*, debug: bool = False, level: str = "info") -> logging.Logger:
    """Configure and return the ``wren`` logger.

    Debug mode logs everything at DEBUG with a short time format; otherwise
    *level* applies with ISO timestamps. Handlers are installed once.
    """
    if not logger.handlers:
        handler = logging.StreamHandler()
        if debug:
            fmt = FieldFormatter("%(asctime)s %(levelname)-5s %(message)s", datefmt="%H:%M:%S")
        else:
            fmt = FieldFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else level.upper())
    return logger
