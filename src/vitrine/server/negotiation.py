"""Content negotiation — maps return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

from typing import Any

from kida import Environment

from vitrine.config import AppConfig
from vitrine.errors import ConfigurationError
from vitrine.http.response import Response
from vitrine.templating.integration import render_template
from vitrine.templating.returns import Template


def negotiate(
    value: Any,
    *,
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    """Convert a handler's return value to a Response.

    Dispatch order:

    1. ``Response``         -> pass through
    2. ``Template``         -> render via kida (with layout) -> Response
    3. ``str``              -> 200, text/html
    4. ``bytes``            -> 200, application/octet-stream
    5. ``(value, int)``     -> negotiate value, override status
    """
    match value:
        case Response():
            return value
        case Template():
            if kida_env is None:
                msg = (
                    "Template return type requires kida integration. "
                    "Ensure a template_dir is configured in AppConfig."
                )
                raise ConfigurationError(msg)
            return Response(body=render_template(kida_env, value, config))
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case (inner, int() as status):
            return negotiate(inner, kida_env=kida_env, config=config).with_status(status)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                f"Return str, bytes, Template, or Response."
            )
            raise TypeError(msg)
