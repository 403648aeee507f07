"""Tests for wren.app — registration, dispatch, 404 fallback, lifecycle."""

import logging
from pathlib import Path

import pytest

from wren.app import App
from wren.config import AppConfig
from wren.context import RequestContext
from wren.errors import ConfigurationError, HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.templating.render import ViewData, redirect, render
from wren.testing import TestClient


def _app(**config: object) -> App:
    return App(AppConfig(secret_key="test", static_dir=None, **config))


class TestAppRegistration:
    def test_static_route_rejected_at_registration(self) -> None:
        app = _app()
        with pytest.raises(ConfigurationError, match="reserved"):

            @app.route("/static/")
            def assets():
                return "never"

    def test_duplicate_route_rejected(self) -> None:
        app = _app()
        app.add_route("/items", lambda: "a")
        with pytest.raises(ConfigurationError, match="twice"):
            app.add_route("/items", lambda: "b")

    def test_routes_constructor_argument(self) -> None:
        with pytest.raises(ConfigurationError):
            App(routes={"/static/": lambda: "x"})

    def test_unsupported_handler_parameter(self) -> None:
        app = _app()

        @app.route("/items")
        def items(item_id):
            return "x"

        with pytest.raises(ConfigurationError, match="item_id"):
            app._ensure_frozen()

    async def test_no_registration_after_freeze(self) -> None:
        app = _app()
        async with TestClient(app):
            pass
        with pytest.raises(RuntimeError):
            app.add_route("/late", lambda: "late")


class TestDispatch:
    async def test_handler_injection(self) -> None:
        app = _app()
        seen: list[object] = []

        @app.route("/both")
        async def both(ctx: RequestContext, request: Request) -> str:
            seen.extend([ctx, request])
            return "ok"

        async with TestClient(app) as client:
            response = await client.get("/both")

        assert response.status == 200
        ctx, request = seen
        assert isinstance(ctx, RequestContext)
        assert request is ctx.request

    async def test_str_becomes_html(self) -> None:
        app = _app()
        app.add_route("/hello", lambda: "<b>hi</b>")

        async with TestClient(app) as client:
            response = await client.get("/hello")

        assert response.text == "<b>hi</b>"
        assert response.content_type == "text/html; charset=utf-8"

    async def test_http_error_becomes_plain_response(self) -> None:
        app = _app()

        @app.route("/teapot")
        def teapot():
            raise HTTPError(status=418, detail="I'm a teapot", headers=(("X-Tea", "earl"),))

        async with TestClient(app) as client:
            response = await client.get("/teapot")

        assert response.status == 418
        assert response.text == "I'm a teapot"
        assert response.header("x-tea") == "earl"
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_method_not_allowed(self) -> None:
        app = _app()
        app.add_route("/items", lambda: "items", methods=["GET", "POST"])

        async with TestClient(app) as client:
            response = await client.delete("/items")
            head = await client.head("/items")

        assert response.status == 405
        assert response.header("allow") == "GET, HEAD, POST"
        assert head.status == 200
        assert head.body == b""

    async def test_unexpected_exception_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        app = _app()

        @app.route("/crash")
        def crash():
            raise RuntimeError("secret internals")

        async with TestClient(app) as client:
            with caplog.at_level(logging.ERROR, logger="wren"):
                response = await client.get("/crash")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "secret internals" in caplog.text

    async def test_bad_return_type_is_500(self) -> None:
        app = _app()
        app.add_route("/dict", lambda: {"not": "supported"})

        async with TestClient(app) as client:
            response = await client.get("/dict")

        assert response.status == 500


class TestNotFound:
    async def test_default_404(self) -> None:
        app = _app()
        app.add_route("/items", lambda: "items")

        async with TestClient(app) as client:
            response = await client.get("/missing")

        assert response.status == 404
        assert response.text == "Not Found"

    async def test_custom_404_without_root(self) -> None:
        app = _app()

        @app.not_found
        def missing(ctx: RequestContext):
            return "custom page"

        async with TestClient(app) as client:
            response = await client.get("/missing")

        assert response.status == 404
        assert response.text == "custom page"

    async def test_root_route_wrapped_with_custom_404(self) -> None:
        app = _app()

        @app.route("/")
        def index(request: Request):
            if request.path != "/":
                raise HTTPError(status=404)
            return "home"

        @app.not_found
        def missing():
            return Response("custom page", status=404)

        async with TestClient(app) as client:
            home = await client.get("/")
            missing_page = await client.get("/missing")

        assert home.text == "home"
        assert missing_page.status == 404
        assert missing_page.text == "custom page"

    async def test_unmatched_path_with_method_root_rejects(self) -> None:
        app = _app()
        app.add_route("/", lambda: "home", methods=["GET"])

        @app.not_found
        def missing():
            return Response("custom page", status=404)

        async with TestClient(app) as client:
            posted = await client.post("/missing")
            posted_root = await client.post("/")

        assert posted.status == 404
        assert posted.text == "custom page"
        assert posted_root.status == 405
        assert posted_root.header("allow") is not None

    async def test_unmatched_path_with_method_root_rejects_default_404(self) -> None:
        app = _app()
        app.add_route("/", lambda: "home", methods=["GET"])

        async with TestClient(app) as client:
            response = await client.post("/missing")

        assert response.status == 404

    async def test_root_without_custom_404_receives_unmatched(self) -> None:
        app = _app()
        app.add_route("/", lambda request: f"root saw {request.path}")

        async with TestClient(app) as client:
            response = await client.get("/anything")

        assert response.text == "root saw /anything"

    async def test_other_routes_not_wrapped(self) -> None:
        app = _app()

        @app.route("/gone")
        def gone():
            raise HTTPError(status=404, detail="gone for good")

        @app.not_found
        def missing():
            return "custom page"

        async with TestClient(app) as client:
            response = await client.get("/gone")

        assert response.status == 404
        assert response.text == "gone for good"

    async def test_custom_404_renders_page(self, template_dir: Path) -> None:
        app = _app(template_dir=template_dir)
        page = app.page("not_found.html")

        @app.not_found
        def missing(ctx: RequestContext):
            return render(ctx, page, ViewData(title="Missing"), 404)

        async with TestClient(app) as client:
            response = await client.get("/missing")

        assert response.status == 404
        assert "Nothing at this address" in response.text
        assert response.header("x-frame-options") == "DENY"


class TestFlashRoundTrip:
    async def test_redirect_then_render_then_nothing(self, template_dir: Path) -> None:
        app = _app(template_dir=template_dir)
        items_page = app.page("items.html")

        @app.route("/items", methods=["GET", "POST"])
        def items(ctx: RequestContext):
            if ctx.request.method == "POST":
                ctx.flash.add("success", "Saved")
                return redirect(ctx, "/items", 303)
            return render(ctx, items_page, ViewData(title="Items"))

        async with TestClient(app) as client:
            posted = await client.post("/items", form={"name": "widget"})
            shown = await client.get("/items")
            again = await client.get("/items")

        assert posted.status == 303
        assert posted.header("location") == "/items"
        cookie = posted.cookie("flash")
        assert cookie is not None
        assert cookie.path == "/"
        assert cookie.secure
        assert cookie.samesite == "Strict"

        assert shown.status == 200
        assert shown.text.count('class="flash-success"') == 1
        assert "Saved" in shown.text
        deletion = shown.cookie("flash")
        assert deletion is not None
        assert deletion.is_deletion

        assert "Saved" not in again.text
        assert again.cookie("flash") is None

    async def test_forged_cookie_shows_nothing(self, template_dir: Path) -> None:
        app = _app(template_dir=template_dir)
        items_page = app.page("items.html")
        app.add_route("/items", lambda ctx: render(ctx, items_page, ViewData()))

        async with TestClient(app) as client:
            client.cookies.set("flash", "forged.value")
            response = await client.get("/items")

        assert response.status == 200
        assert "flash-" not in response.text
        assert "flash" not in client.cookies


class TestTemplates:
    def test_page_missing_template_fails_at_startup(self, tmp_path: Path) -> None:
        app = _app(template_dir=tmp_path)
        with pytest.raises(ConfigurationError):
            app.page("missing.html")


class TestLifespan:
    async def test_hooks_run(self) -> None:
        app = _app()
        events: list[str] = []

        @app.on_startup
        async def start():
            events.append("start")

        @app.on_shutdown
        def stop():
            events.append("stop")

        messages = iter([{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}])
        sent: list[dict] = []

        async def receive():
            return next(messages)

        async def send(message):
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)

        assert events == ["start", "stop"]
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]

    async def test_configuration_error_fails_startup(self) -> None:
        app = _app(time_zone="Not/AZone")
        sent: list[dict] = []

        async def receive():
            return {"type": "lifespan.startup"}

        async def send(message):
            sent.append(message)

        await app({"type": "lifespan"}, receive, send)

        assert sent[0]["type"] == "lifespan.startup.failed"
        assert "Not/AZone" in sent[0]["message"]


class TestStartupLogging:
    def test_csrf_disabled_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        app = _app()
        with caplog.at_level(logging.INFO, logger="wren"):
            app._ensure_frozen()

        assert any(
            r.levelno == logging.WARNING and r.getMessage() == "CSRF protection disabled"
            for r in caplog.records
        )

    def test_csrf_enabled_info(self, caplog: pytest.LogCaptureFixture) -> None:
        app = _app(csrf_enabled=True)
        with caplog.at_level(logging.INFO, logger="wren"):
            app._ensure_frozen()

        assert any(
            r.levelno == logging.INFO and r.getMessage() == "CSRF protection enabled"
            for r in caplog.records
        )

    def test_missing_secret_key_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        app = App(AppConfig(static_dir=None))
        with caplog.at_level(logging.WARNING, logger="wren"):
            app._ensure_frozen()

        assert "no secret_key configured" in caplog.text
