"""The vitrine application object.

An ``App`` collects routes, error pages, template helpers and
middleware while the module that builds it is being imported. The first
request (or ``run()``, or ASGI lifespan startup) compiles that setup
into a router, a middleware tuple and a kida environment. From then on
the app is read-only.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kida import Environment

from vitrine._internal.asgi import Receive, Scope, Send
from vitrine._internal.invoke import invoke
from vitrine._internal.types import ErrorHandler, Handler
from vitrine.config import AppConfig
from vitrine.errors import ConfigurationError
from vitrine.middleware.protocol import Middleware
from vitrine.middleware.static import StaticFiles
from vitrine.routing.route import Route
from vitrine.routing.router import Router
from vitrine.server.handler import handle_request
from vitrine.templating.integration import create_environment

logger = logging.getLogger("vitrine.app")


@dataclass(frozen=True, slots=True)
class _PendingRoute:
    """A route as registered, before compilation."""

    path: str
    handler: Handler
    methods: list[str] | None
    name: str | None


class App:
    """A template-rendering web application.

    Build it, register everything, then serve it::

        app = App()

        @app.route("/saymyname/{fname}/{lname}")
        def say_my_name(fname: str, lname: str):
            return Template("say-name.html", fname=fname, lname=lname)

        @app.error(404)
        def not_found():
            return Template("not-found.html")

        app.run()

    Compilation happens once, under a lock with a second check inside,
    so concurrent first requests never compile twice.
    """

    __slots__ = (
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_listen_port",
        "_middleware",
        "_middleware_list",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_filters",
        "_template_globals",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()

        # Setup-time registries
        self._pending_routes: list[_PendingRoute] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._middleware_list: list[Middleware] = []
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []

        # Runtime state, filled by _freeze()
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._router: Router | None = None
        self._middleware: tuple[Callable[..., Any], ...] = ()
        self._kida_env: Environment | None = None
        self._listen_port: int | None = None

    # -- Registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator binding *path* to a handler.

        ``{name}`` segments are passed to the handler as keyword
        arguments of the same name. *methods* defaults to ``["GET"]``;
        GET routes also answer HEAD. Earlier registrations win.
        """

        def register(func: Handler) -> Handler:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, methods, name))
            return func

        return register

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Decorator for an error page.

        Keyed by status (``404``, ``500``) or by exception class. The
        ``500`` handler receives every failure that is not an
        ``HTTPError`` and has no handler of its own. Handlers take
        ``()``, ``(request)`` or ``(request, exc)``.
        """

        def register(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return register

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware*; the first one added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def template_filter(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator adding a kida filter next to the built-in helpers."""

        def register(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_filters[name or func.__name__] = func
            return func

        return register

    def template_global(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator adding a kida global next to the built-in helpers."""

        def register(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_globals[name or func.__name__] = func
            return func

        return register

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) at lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Run *func* (sync or async) at lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile the app and serve it with pounce until interrupted.

        The listening message is logged once the server has bound and
        sent lifespan startup, not before.
        """
        self._ensure_frozen()

        from vitrine.server.dev import run_server

        bind_host = host or self.config.host
        bind_port = port or self.config.port
        self._listen_port = bind_port
        run_server(self, bind_host, bind_port, reload=self.config.debug)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_handlers=self._error_handlers,
            kida_env=self._kida_env,
            config=self.config,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()

            if message["type"] == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
                if self._listen_port is not None:
                    logger.info("Server listening on port %d", self._listen_port)

            elif message["type"] == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """Compiled routes in match order. Compiles the app."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    @property
    def kida_env(self) -> Environment:
        """The kida environment with helpers bound. Compiles the app."""
        self._ensure_frozen()
        assert self._kida_env is not None
        return self._kida_env

    # -- Compilation --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        """Compile setup state. Caller holds ``_freeze_lock``."""
        router = Router()
        for pending in self._pending_routes:
            router.add(
                Route(
                    path=pending.path,
                    handler=pending.handler,
                    methods=frozenset(m.upper() for m in pending.methods or ["GET"]),
                    name=pending.name,
                )
            )
        router.compile()

        # Static assets are answered before routing
        middleware: list[Middleware] = []
        if self.config.static_dir is not None:
            middleware.append(
                StaticFiles(
                    directory=self.config.static_dir,
                    prefix=self.config.static_url,
                    cache_control=self.config.static_cache_control,
                )
            )
        middleware.extend(self._middleware_list)

        self._kida_env = create_environment(
            self.config,
            self._template_filters,
            self._template_globals,
        )
        self._router = router
        self._middleware = tuple(middleware)
        self._frozen = True
        logger.debug("App compiled: %d routes, %d middleware", len(router.routes), len(middleware))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, error pages, middleware and helpers before app.run()."
            )
            raise ConfigurationError(msg)
