"""Shared type aliases used across vitrine modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: a user-defined function taking path params by name
Handler: TypeAlias = Callable[..., Any]

# Error handler: receives (request, error?) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]
