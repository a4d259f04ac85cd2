"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from vitrine._internal.asgi import Receive, Scope
from vitrine.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Path parameters are filled in once the router has matched.
    """

    method: str
    path: str  # percent-decoded
    raw_path: str  # as sent, used for routing
    headers: Headers
    query_string: str
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    def with_path_params(self, path_params: dict[str, str]) -> "Request":
        """Return a copy carrying the router's captured parameters."""
        return replace(self, path_params=path_params)

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive is consumed once; later calls return the cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> "Request":
        """Create a Request from an ASGI scope and receive callable."""
        raw_path = scope.get("raw_path")
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=raw_path.decode("latin-1") if raw_path else scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
