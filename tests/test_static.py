"""Tests for static file serving middleware."""

import pytest

from vitrine.app import App
from vitrine.config import AppConfig
from vitrine.middleware.static import StaticFiles
from vitrine.testing import TestClient


@pytest.fixture
def static_dir(tmp_path):
    """Create temporary static files for testing."""
    static = tmp_path / "static"
    static.mkdir()

    (static / "style.css").write_text("body { color: red; }")
    (static / "app.js").write_text("console.log('hello');")
    (static / "data.bin").write_bytes(b"\x00\x01\x02\x03")
    (tmp_path / "secret.txt").write_text("top secret")

    docs = static / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Docs</h1>")

    (static / "empty").mkdir()

    return static


@pytest.fixture
def app(tmp_path, static_dir) -> App:
    app = App(AppConfig(template_dir=tmp_path, static_dir=None))
    app.add_middleware(StaticFiles(directory=static_dir, prefix="/static"))

    @app.route("/")
    def index():
        return "home"

    return app


class TestStaticFileServing:
    async def test_serves_css_file(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/style.css")
            assert response.status == 200
            assert response.content_type == "text/css; charset=utf-8"
            assert response.text == "body { color: red; }"

    async def test_cache_control(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/app.js")
            assert response.header("Cache-Control") == "public, max-age=3600"

    async def test_unknown_type_is_octet_stream(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/data.bin")
            assert response.content_type == "application/octet-stream"
            assert response.body == b"\x00\x01\x02\x03"

    async def test_head_has_no_body(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.head("/static/style.css")
            assert response.status == 200
            assert response.body == b""
            assert response.header("content-length") == str(len("body { color: red; }"))

    async def test_routes_still_work(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.text == "home"


class TestStaticFallThrough:
    async def test_missing_file_is_not_found(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/missing.css")
            assert response.status == 404

    async def test_prefix_must_end_at_segment(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/staticstyle.css")
            assert response.status == 404

    async def test_post_is_not_served(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.post("/static/style.css")
            assert response.status == 404

    async def test_directory_without_index(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/empty/")
            assert response.status == 404


class TestStaticDirectories:
    async def test_index_redirects_to_trailing_slash(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/docs")
            assert response.status == 301
            assert response.header("Location") == "/static/docs/"

    async def test_index_served(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/docs/")
            assert response.status == 200
            assert "<h1>Docs</h1>" in response.text


class TestStaticSecurity:
    async def test_traversal_forbidden(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/../secret.txt")
            assert response.status == 403
            assert "top secret" not in response.text

    async def test_nested_traversal_forbidden(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/static/docs/../../secret.txt")
            assert response.status == 403
