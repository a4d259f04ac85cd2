"""Compiled router with ordered, first-match-wins dispatch.

Each route path compiles to one regex. Matching walks the table in
registration order and returns the first route whose pattern and
method both match. Patterns run against the raw (still percent-encoded)
request path, so an encoded ``/`` stays inside its segment; captured
values are decoded afterwards.
"""

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote

from vitrine.errors import ConfigurationError, NotFound
from vitrine.routing.route import PathSegment, Route, RouteMatch

_PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/list"                    -> [PathSegment("list")]
        "/saymyname/{fname}/{lname}" -> [PathSegment("saymyname"),
                                         PathSegment("{fname}", is_param=True, ...),
                                         PathSegment("{lname}", is_param=True, ...)]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            param_name = part[1:-1]
            if not _PARAM_NAME.match(param_name):
                msg = f"Invalid path parameter {part!r} in route {path!r}"
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=param_name))
        else:
            segments.append(PathSegment(value=part))
    return segments


def compile_path(path: str) -> re.Pattern[str]:
    """Compile a route path into an anchored regex.

    Static segments match case-insensitively, a trailing slash is
    optional, and each ``{name}`` captures one non-empty segment.
    """
    segments = parse_path(path)
    names = [seg.param_name for seg in segments if seg.is_param]
    if len(names) != len(set(names)):
        msg = f"Duplicate path parameter in route {path!r}"
        raise ConfigurationError(msg)

    pattern = "".join(
        f"/(?P<{seg.param_name}>[^/]+)" if seg.is_param else "/" + re.escape(quote(seg.value))
        for seg in segments
    )
    return re.compile(f"^{pattern}/?$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class _CompiledRoute:
    route: Route
    regex: re.Pattern[str]


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.add(Route("/", handler, frozenset({"GET"})))
        router.add(Route("/users/{id}", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_table")

    def __init__(self) -> None:
        self._table: list[_CompiledRoute] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Append a route to the table. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._table.append(_CompiledRoute(route, compile_path(route.path)))

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return [entry.route for entry in self._table]

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Return the first route matching *method* and *path*.

        *path* is the raw request path. Captured parameters are
        percent-decoded. ``HEAD`` requests are served by ``GET`` routes.
        Raises ``NotFound`` if nothing matches.
        """
        candidates = {method, "GET"} if method == "HEAD" else {method}
        for entry in self._table:
            if entry.route.methods.isdisjoint(candidates):
                continue
            found = entry.regex.match(path)
            if found is not None:
                params = {name: unquote(value) for name, value in found.groupdict().items()}
                return RouteMatch(route=entry.route, path_params=params)
        raise NotFound(f"No route matches {method} {path!r}")
