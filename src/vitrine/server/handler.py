"""ASGI handler — translates ASGI scope/messages to vitrine types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through middleware and routing,
and sends the Response back through ASGI send().
"""

import inspect
from collections.abc import Callable
from typing import Any

from kida import Environment

from vitrine._internal.asgi import Receive, Scope, Send
from vitrine._internal.invoke import invoke
from vitrine.config import AppConfig
from vitrine.errors import HTTPError
from vitrine.http.request import Request
from vitrine.http.response import Response
from vitrine.middleware.protocol import Next
from vitrine.routing.route import RouteMatch
from vitrine.routing.router import Router
from vitrine.server.errors import handle_http_error, handle_internal_error
from vitrine.server.negotiation import negotiate
from vitrine.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None,
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        # Innermost handler: router dispatch
        async def dispatch(req: Request) -> Response:
            match = router.match(req.method, req.raw_path)
            return await _invoke_handler(match, req, kida_env=kida_env, config=config)

        # Wrap middleware around the dispatch
        handler: Next = dispatch
        for mw in reversed(middleware):

            async def make_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
                return await _mw(req, _next)

            handler = make_next

        response = await handler(request)

    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, kida_env, config)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, kida_env, config)

    await send_response(response, send, method=request.method)


async def _invoke_handler(
    match: RouteMatch,
    request: Request,
    *,
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    """Call the matched route handler and convert its return value."""
    handler = match.route.handler
    request = request.with_path_params(match.path_params)
    kwargs = _build_handler_kwargs(handler, request, match.path_params)
    result = await invoke(handler, **kwargs)
    return negotiate(result, kida_env=kida_env, config=config)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, str],
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from request + path params.

    A parameter named ``request`` (or annotated ``Request``) receives the
    request; any other parameter named after a path parameter receives
    its captured string unchanged.
    """
    sig = inspect.signature(handler)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            kwargs[name] = path_params[name]

    return kwargs
