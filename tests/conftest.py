"""Shared fixtures: request contexts and on-disk templates."""

from collections.abc import Callable
from pathlib import Path

import pytest

from wren.context import Ambient, RequestContext
from wren.flash.codec import FlashCodec
from wren.http.request import Request

SECRET = "test-secret"

BASE_TEMPLATE = """<html><head><title>{{ title }}</title></head><body>
{% for flash in flashes %}<p class="flash-{{ flash.kind }}">{{ flash.text }}</p>{% end %}
{% block content %}{% endblock %}
</body></html>"""


def _scope(method: str, path: str, headers: dict[str, str]) -> dict[str, object]:
    path, _, query = path.partition("?")
    return {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query.encode("latin-1"),
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()],
        "client": ("127.0.0.1", 0),
    }


@pytest.fixture
def codec() -> FlashCodec:
    return FlashCodec(SECRET)


@pytest.fixture
def make_context(codec: FlashCodec) -> Callable[..., RequestContext]:
    """Factory for a RequestContext around a synthetic request."""

    def make(
        method: str = "GET",
        path: str = "/",
        *,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ) -> RequestContext:
        merged = dict(headers or {})
        if cookies:
            merged["cookie"] = "; ".join(f"{k}={v}" for k, v in cookies.items())
        request = Request.from_asgi(_scope(method, path, merged))
        return RequestContext.create(request, Ambient(codec=codec))

    return make


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A template directory holding ``base.html`` and a few pages."""
    (tmp_path / "base.html").write_text(BASE_TEMPLATE)
    (tmp_path / "items.html").write_text(
        "{% block content %}<ul>{% for item in items %}<li>{{ item }}</li>{% end %}</ul>"
        "{% endblock %}"
    )
    (tmp_path / "not_found.html").write_text(
        "{% block content %}<h1>Nothing at this address</h1>{% endblock %}"
    )
    return tmp_path
