"""Server startup.

Starts a pounce ASGI server with the live vitrine App object.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
) -> None:
    """Start a single-worker pounce server with the given App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but vitrine has a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (vitrine App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
    )
    Server(config, app).run()
