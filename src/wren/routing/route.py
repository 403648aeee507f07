"""Route definition frozen dataclass."""

from dataclasses import dataclass

from wren._internal.types import Handler


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    ``methods`` of ``None`` accepts every method.
    """

    path: str
    handler: Handler
    methods: frozenset[str] | None = None


def normalize_methods(methods: list[str] | None) -> frozenset[str] | None:
    """Upper-case *methods*; a GET route also answers HEAD."""
    if methods is None:
        return None
    result = {m.upper() for m in methods}
    if "GET" in result:
        result.add("HEAD")
    return frozenset(result)
