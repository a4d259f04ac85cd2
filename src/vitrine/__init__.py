"""Vitrine — a template engine wired into a small web server.

Layouts, partials, helpers, a first-match route table, static files,
and centralized error pages, rendered with kida over ASGI.

Basic usage::

    from vitrine import App, Template

    app = App()

    @app.route("/greet/{name}")
    def greet(name: str):
        return Template("greet.html", name=name)

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "AppError",
    "AuthenticationError",
    "ConfigurationError",
    "HTTPError",
    "Middleware",
    "Next",
    "NotFound",
    "RenderError",
    "Request",
    "RequiredFieldError",
    "Response",
    "Template",
    "VitrineError",
    "equals",
    "error_code",
    "format_currency_brl",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import vitrine`` fast while providing a clean top-level API.
    """
    if name == "App":
        from vitrine.app import App

        return App

    if name == "AppConfig":
        from vitrine.config import AppConfig

        return AppConfig

    if name == "Request":
        from vitrine.http.request import Request

        return Request

    if name == "Response":
        from vitrine.http.response import Response

        return Response

    if name == "Template":
        from vitrine.templating.returns import Template

        return Template

    if name in ("Middleware", "Next"):
        from vitrine.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("equals", "format_currency_brl"):
        from vitrine.templating import helpers as _helpers

        return getattr(_helpers, name)

    if name in (
        "AppError",
        "AuthenticationError",
        "ConfigurationError",
        "HTTPError",
        "NotFound",
        "RenderError",
        "RequiredFieldError",
        "VitrineError",
        "error_code",
    ):
        from vitrine import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
