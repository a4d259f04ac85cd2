"""ASGI response sending — translates a vitrine Response to ASGI messages."""

from vitrine._internal.asgi import Send
from vitrine.http.response import Response


def _body_allowed(status: int, method: str) -> bool:
    """Whether the response to this request carries a body."""
    # RFC: HEAD responses, 1xx, 204, and 304 do not include a message body.
    if method == "HEAD":
        return False
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate a vitrine Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    # Content-Length describes the GET body even for HEAD
    body = response.body_bytes
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))
    if not _body_allowed(response.status, method):
        body = b""

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
