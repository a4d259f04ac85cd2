"""Error handling pipeline for vitrine requests.

Maps HTTPError exceptions and unexpected failures to Response objects,
using registered error handlers or plain-text defaults. This is the
single recovery point: route handlers never catch.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from kida import Environment

from vitrine.config import AppConfig
from vitrine.errors import HTTPError
from vitrine.http.request import Request
from vitrine.http.response import Response
from vitrine.server.negotiation import negotiate

logger = logging.getLogger("vitrine.server")

INTERNAL_ERROR_BODY = "Internal Server Error"


def _plain(body: str, status: int) -> Response:
    return Response(body=body, status=status, content_type="text/plain; charset=utf-8")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    params = list(inspect.signature(handler).parameters.values())

    if len(params) >= 2:
        result = handler(request, exc)
    elif len(params) == 1:
        result = handler(request)
    else:
        result = handler()

    if inspect.isawaitable(result):
        result = await result

    return negotiate(result, kida_env=kida_env, config=config)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    # Try exact exception type, then status code
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        try:
            response = await call_error_handler(handler, request, exc, kida_env, config)
        except Exception as handler_exc:
            return await handle_internal_error(
                handler_exc, request, error_handlers, kida_env, config
            )
        # Keep the exception's status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    detail = exc.detail or f"Error {exc.status}"
    resp = _plain(detail, exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    """Handle unexpected exceptions as 500 errors.

    The failure is logged with its traceback before any handler runs.
    If the registered handler fails too, that is logged and a minimal
    plain-text 500 goes out instead.
    """
    logger.error(
        "500 %s %s", request.method, request.path, exc_info=(type(exc), exc, exc.__traceback__)
    )

    handler = error_handlers.get(type(exc)) or error_handlers.get(500)
    if handler is None:
        return _plain(INTERNAL_ERROR_BODY, 500)

    try:
        response = await call_error_handler(handler, request, exc, kida_env, config)
    except Exception:
        logger.exception("Error handler failed for %s %s", request.method, request.path)
        return _plain(INTERNAL_ERROR_BODY, 500)

    if response.status == 200:
        response = response.with_status(500)
    return response
