"""Vitrine exception hierarchy.

Two families live here:

- Framework errors (``VitrineError`` and below) shared across Router,
  App, the ASGI handler, and middleware so every module raises and
  catches the same types.
- Application errors (``AppError`` and below) raised by route handlers.
  Each kind carries a stable machine-readable ``code`` that the error
  page shows instead of the free-form message.
"""

from dataclasses import dataclass
from typing import ClassVar

UNKNOWN_ERROR = "unknown_error"


class VitrineError(Exception):
    """Base for all vitrine framework errors."""


class ConfigurationError(VitrineError):
    """Raised when app configuration is invalid.

    Typically caught during ``App._freeze()`` at startup.
    """


class RenderError(VitrineError):
    """A template could not be rendered.

    Raised for a missing template or layout, a syntax error, or a
    reference to an undefined helper, partial, or variable. The
    original kida exception is chained as ``__cause__``.
    """

    def __init__(self, template: str, detail: str = "") -> None:
        self.template = template
        self.detail = detail
        super().__init__(f"{template}: {detail}" if detail else template)


@dataclass(frozen=True, slots=True)
class HTTPError(VitrineError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. The ASGI handler
    catches these and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class AppError(Exception):
    """Base for application errors raised by route handlers.

    Subclasses override ``code`` only. The message is developer-facing
    and goes to the log; the code is what the user sees.
    """

    code: ClassVar[str] = UNKNOWN_ERROR

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __setattr__(self, name: str, value: object) -> None:
        if name == "code":
            msg = f"{type(self).__name__}.code is read-only"
            raise AttributeError(msg)
        super().__setattr__(name, value)


class AuthenticationError(AppError):
    """Credentials were rejected."""

    code = "auth_error"


class RequiredFieldError(AppError):
    """A required input field was missing."""

    code = "required_field_error"


def error_code(exc: BaseException) -> str:
    """Return the user-facing code for *exc*.

    ``AppError`` instances report their own code; anything else
    (a ``TypeError`` from a ``None`` access, a render failure, ...)
    reports ``unknown_error``.
    """
    if isinstance(exc, AppError):
        return exc.code
    return UNKNOWN_ERROR
