"""Tests for vitrine.server.errors — error handlers, fallbacks, and logging."""

import logging

import pytest

from vitrine.app import App
from vitrine.config import AppConfig
from vitrine.errors import AuthenticationError, HTTPError, error_code
from vitrine.templating.returns import Template
from vitrine.testing import TestClient


@pytest.fixture
def config(tmp_path) -> AppConfig:
    (tmp_path / "layouts").mkdir()
    (tmp_path / "layouts" / "main.html").write_text("<main>{{ body }}</main>")
    (tmp_path / "error.html").write_text("<p>code={{ code }}</p>")
    (tmp_path / "not-found.html").write_text("<p>nothing here</p>")
    return AppConfig(template_dir=tmp_path, static_dir=None)


def _failing_app(config: AppConfig) -> App:
    app = App(config)

    @app.route("/auth")
    def auth():
        raise AuthenticationError("User or password does not match")

    @app.route("/none")
    def none_access():
        data = None
        return data["key"]  # type: ignore[index]

    return app


class TestDefaults:
    async def test_unregistered_404_is_plain_text(self, config) -> None:
        app = App(config)
        async with TestClient(app) as client:
            response = await client.get("/missing")
            assert response.status == 404
            assert response.content_type.startswith("text/plain")

    async def test_unregistered_500_is_minimal(self, config) -> None:
        app = _failing_app(config)
        async with TestClient(app) as client:
            response = await client.get("/auth")
            assert response.status == 500
            assert response.text == "Internal Server Error"

    async def test_http_error_headers_kept(self, config) -> None:
        app = App(config)

        @app.route("/teapot")
        def teapot():
            raise HTTPError(status=418, detail="short and stout", headers=(("X-Pot", "tea"),))

        async with TestClient(app) as client:
            response = await client.get("/teapot")
            assert response.status == 418
            assert response.text == "short and stout"
            assert response.header("X-Pot") == "tea"


class TestRegisteredHandlers:
    async def test_500_handler_shows_code(self, config) -> None:
        app = _failing_app(config)

        @app.error(500)
        def server_error(request, exc):
            return Template("error.html", code=error_code(exc)), 500

        async with TestClient(app) as client:
            response = await client.get("/auth")
            assert response.status == 500
            assert "code=auth_error" in response.text
            assert "User or password" not in response.text

    async def test_unexpected_error_is_unknown(self, config) -> None:
        app = _failing_app(config)

        @app.error(500)
        def server_error(request, exc):
            return Template("error.html", code=error_code(exc))

        async with TestClient(app) as client:
            response = await client.get("/none")
            assert response.status == 500
            assert "code=unknown_error" in response.text

    async def test_404_handler_keeps_status(self, config) -> None:
        app = App(config)

        @app.error(404)
        def not_found():
            return Template("not-found.html")

        async with TestClient(app) as client:
            response = await client.get("/missing")
            assert response.status == 404
            assert "<main><p>nothing here</p></main>" in response.text

    async def test_handler_by_exception_type(self, config) -> None:
        app = _failing_app(config)

        @app.error(AuthenticationError)
        def auth_failed():
            return "please sign in", 401

        @app.error(500)
        def server_error():
            return "generic"

        async with TestClient(app) as client:
            auth = await client.get("/auth")
            other = await client.get("/none")
        assert (auth.status, auth.text) == (401, "please sign in")
        assert (other.status, other.text) == (500, "generic")

    async def test_async_error_handler(self, config) -> None:
        app = _failing_app(config)

        @app.error(500)
        async def server_error(request):
            return f"failed at {request.path}"

        async with TestClient(app) as client:
            response = await client.get("/auth")
            assert response.status == 500
            assert response.text == "failed at /auth"


class TestHandlerFailures:
    async def test_broken_error_template_gives_minimal_500(self, config, caplog) -> None:
        app = _failing_app(config)

        @app.error(500)
        def server_error(request, exc):
            return Template("missing-error-page.html", code=error_code(exc))

        with caplog.at_level(logging.ERROR, logger="vitrine.server"):
            async with TestClient(app) as client:
                response = await client.get("/auth")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert any("Error handler failed" in r.getMessage() for r in caplog.records)

    async def test_failing_404_handler_falls_back_to_500(self, config) -> None:
        app = App(config)

        @app.error(404)
        def not_found():
            raise RuntimeError("boom")

        @app.error(500)
        def server_error(request, exc):
            return Template("error.html", code=error_code(exc))

        async with TestClient(app) as client:
            response = await client.get("/missing")
            assert response.status == 500
            assert "code=unknown_error" in response.text

    async def test_unsupported_return_value(self, config) -> None:
        app = App(config)

        @app.route("/")
        def index():
            return 42

        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 500


class TestLogging:
    async def test_failure_logged_with_traceback(self, config, caplog) -> None:
        app = _failing_app(config)

        with caplog.at_level(logging.ERROR, logger="vitrine.server"):
            async with TestClient(app) as client:
                await client.get("/auth")

        records = [r for r in caplog.records if r.name == "vitrine.server"]
        assert records
        assert records[0].levelno == logging.ERROR
        assert "GET /auth" in records[0].getMessage()
        assert records[0].exc_info is not None
        assert records[0].exc_info[0] is AuthenticationError

    async def test_not_found_is_not_logged_as_error(self, config, caplog) -> None:
        app = App(config)

        with caplog.at_level(logging.DEBUG, logger="vitrine.server"):
            async with TestClient(app) as client:
                await client.get("/missing")

        assert all(r.levelno < logging.ERROR for r in caplog.records if r.name == "vitrine.server")
