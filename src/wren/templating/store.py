"""Template store — compiles base + child template pairs into pages.

Every page is two files from the template directory: a shared base layout
and a page-specific child that fills the base's blocks::

    {# base.html #}
    <html><body>{% block content %}{% endblock %}</body></html>

    {# items.html #}
    {% block content %}<ul>...</ul>{% endblock %}

A child may declare ``{% extends %}`` itself, naming the base it is composed
with; if it doesn't, it is made to extend that base. The base is the root of
the chain and extends nothing. Pages are built at startup, and any missing
file, syntax error or inheritance mismatch is a ``ConfigurationError``, so a
broken template stops the app before it serves traffic.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kida import DictLoader, Environment
from kida.environment.exceptions import TemplateNotFoundError, TemplateSyntaxError

from wren.errors import ConfigurationError

_EXTENDS = re.compile(
    r"^\s*(?:\{#.*?#\}\s*)*\{%-?\s*extends\s+(?:([\"'])(?P<target>[^\"']*)\1)?",
    re.DOTALL,
)


def template_context(data: Any) -> dict[str, Any]:
    """Top-level template names for *data*.

    Dataclass fields are exposed by name; the object itself is always
    available as ``data``.
    """
    context: dict[str, Any] = {}
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        context.update((f.name, getattr(data, f.name)) for f in dataclasses.fields(data))
    context["data"] = data
    return context


@dataclass(frozen=True, slots=True)
class Page:
    """A compiled, reusable page. Immutable after construction."""

    name: str
    base_name: str
    template: Any  # kida Template

    def render(self, data: Any) -> str:
        """Execute the template against *data*. Template errors propagate."""
        return self.template.render(template_context(data))


class TemplateStore:
    """Load templates from a directory and compose them into pages.

    Usage::

        store = TemplateStore("templates")
        items_page = store.compose("items.html", "base.html")
    """

    __slots__ = ("_autoescape", "_directory", "_filters", "_globals", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "",
        *,
        autoescape: bool = True,
        filters: dict[str, Callable[..., Any]] | None = None,
        globals_: dict[str, Any] | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._prefix = prefix
        self._autoescape = autoescape
        self._filters = dict(filters or {})
        self._globals = dict(globals_ or {})

    def _read(self, name: str) -> str:
        path = self._directory / self._prefix / name
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot read template {name!r} from {path.parent}: {exc.strerror or exc}"
            raise ConfigurationError(msg) from exc

    def _environment(self, sources: dict[str, str]) -> Environment:
        env = Environment(loader=DictLoader(sources), autoescape=self._autoescape)
        if self._filters:
            env.update_filters(self._filters)
        for name, value in self._globals.items():
            env.add_global(name, value)
        return env

    def compose(self, name: str, base_name: str) -> Page:
        """Compile *name* on top of *base_name* into a ``Page``.

        Raises ``ConfigurationError`` if either file is missing, fails
        to parse, or the child extends a template other than *base_name*.
        """
        base_source = self._read(base_name)
        child_source = self._read(name)
        if _EXTENDS.match(base_source):
            msg = f"Base template {base_name!r} must not extend another template."
            raise ConfigurationError(msg)

        declared = _EXTENDS.match(child_source)
        if declared is None:
            child_source = f'{{% extends "{base_name}" %}}' + child_source
        elif declared.group("target") != base_name:
            target = declared.group("target") or "a computed name"
            msg = f"Template {name!r} extends {target!r}, but its base is {base_name!r}."
            raise ConfigurationError(msg)

        env = self._environment({base_name: base_source, name: child_source})
        try:
            env.get_template(base_name)
            template = env.get_template(name)
        except (TemplateSyntaxError, TemplateNotFoundError) as exc:
            msg = f"Cannot compile template {name!r} with base {base_name!r}: {exc}"
            raise ConfigurationError(msg) from exc
        return Page(name=name, base_name=base_name, template=template)
