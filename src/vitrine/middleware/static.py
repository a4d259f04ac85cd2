"""Static file serving middleware.

Serves read-only files from a directory under a URL prefix, with
index file resolution for directories. Falls through to the next
handler for non-matching paths and missing files.
"""

import mimetypes
from pathlib import Path

from vitrine.http.request import Request
from vitrine.http.response import Response
from vitrine.middleware.protocol import Next


class StaticFiles:
    """Middleware that serves static files from a directory.

    Files are served for paths matching the configured prefix.
    Non-matching paths and missing files fall through to the next
    handler, so the router's 404 handling applies.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        app.add_middleware(StaticFiles(directory="./static", prefix="/static"))
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control
        self._prefix = "/" + prefix.strip("/")

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        path = request.path
        if not path.startswith(self._prefix + "/") and path != self._prefix:
            return await next(request)
        relative = path[len(self._prefix) :].lstrip("/")

        # Resolve the file path and check for traversal
        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            return Response(body="Forbidden", status=403, content_type="text/plain; charset=utf-8")

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return await next(request)
            # Relative links inside the index need the trailing slash
            if not path.endswith("/"):
                return Response(body="", status=301).with_header("Location", path + "/")
            file_path = index_path

        if not file_path.is_file():
            return await next(request)

        return self._serve_file(file_path)

    def _serve_file(self, file_path: Path) -> Response:
        """Read a file and build a response."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/"):
            content_type = f"{content_type}; charset=utf-8"

        return Response(
            body=file_path.read_bytes(), content_type=content_type
        ).with_header("Cache-Control", self._cache_control)
