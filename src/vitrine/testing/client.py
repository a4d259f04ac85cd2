"""In-process client for exercising a vitrine app in tests.

Requests go straight into the ASGI callable; nothing touches a socket.
The captured messages are folded back into the production ``Response``
type so assertions read the same as handler code.
"""

from typing import Any
from urllib.parse import unquote

from vitrine._internal.asgi import Receive
from vitrine._internal.invoke import invoke
from vitrine.app import App
from vitrine.http.response import Response

_LATIN1 = "latin-1"


def _build_scope(method: str, path: str, headers: dict[str, str] | None) -> dict[str, Any]:
    path_part, _, query = path.partition("?")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": unquote(path_part),
        "raw_path": path_part.encode(_LATIN1),
        "query_string": query.encode(_LATIN1),
        "root_path": "",
        "headers": [
            (name.lower().encode(_LATIN1), value.encode(_LATIN1))
            for name, value in (headers or {}).items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


def _single_body(body: bytes) -> Receive:
    messages = [{"type": "http.request", "body": body, "more_body": False}]

    async def receive() -> dict[str, Any]:
        if messages:
            return messages.pop()
        return {"type": "http.disconnect"}

    return receive


class _Captured:
    """Collects ``http.response.*`` messages from one request."""

    __slots__ = ("body", "headers", "status")

    def __init__(self) -> None:
        self.status = 500
        self.headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def __call__(self, message: dict[str, Any]) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = list(message.get("headers", ()))
        elif message["type"] == "http.response.body":
            self.body.extend(message.get("body", b""))

    def to_response(self) -> Response:
        content_type = "text/html; charset=utf-8"
        extra: list[tuple[str, str]] = []
        for raw_name, raw_value in self.headers:
            name, value = raw_name.decode(_LATIN1), raw_value.decode(_LATIN1)
            if name == "content-type":
                content_type = value
            else:
                extra.append((name, value))
        return Response(
            body=bytes(self.body),
            status=self.status,
            content_type=content_type,
            headers=tuple(extra),
        )


class TestClient:
    """Drive a vitrine app without a server.

    Entering the context freezes the app and runs its startup hooks;
    leaving it runs the shutdown hooks::

        async with TestClient(create_app()) as client:
            response = await client.get("/products")
            assert "R$" in response.text
    """

    __test__ = False  # collected by pytest otherwise
    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> "TestClient":
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            await invoke(hook)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        for hook in self.app._shutdown_hooks:
            await invoke(hook)

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("HEAD", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        return await self.request("POST", path, headers=headers, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send one request through the app and return what it sent back.

        ``content-length`` and any other header except ``content-type``
        stay in ``Response.headers``.
        """
        captured = _Captured()
        await self.app(_build_scope(method, path, headers), _single_body(body or b""), captured)
        return captured.to_response()
