"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function taking ``ctx`` and/or ``request``
Handler: TypeAlias = Callable[..., Any]
