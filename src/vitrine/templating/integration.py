"""Kida environment setup and app binding.

Creates a kida Environment from vitrine's AppConfig and binds the
helper mapping as globals and filters. The environment is created
once during App._freeze() and passed through the request pipeline.

Layouts work the way most server-side view engines do them: the page
template is rendered first, then the layout is rendered with the same
context plus ``body`` holding the page output.
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader
from kida.environment.exceptions import (
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
)
from kida.template import Markup

from vitrine.config import AppConfig
from vitrine.errors import RenderError
from vitrine.templating.helpers import DEFAULT_HELPERS
from vitrine.templating.returns import Template

_KIDA_ERRORS = (
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
)


def create_environment(
    config: AppConfig,
    filters: Mapping[str, Callable[..., Any]],
    globals_: Mapping[str, Any],
) -> Environment:
    """Create a kida Environment from app configuration.

    Called once during ``App._freeze()``. The returned environment
    is immutable for the lifetime of the app.

    ``DEFAULT_HELPERS`` are registered as both globals and filters;
    user-registered filters and globals may override them.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    env.update_filters(dict(DEFAULT_HELPERS))
    if filters:
        env.update_filters(dict(filters))

    for name, value in DEFAULT_HELPERS.items():
        env.add_global(name, value)
    for name, value in globals_.items():
        env.add_global(name, value)

    return env


def _render(env: Environment, name: str, context: Mapping[str, Any]) -> str:
    try:
        template = env.get_template(name)
        return template.render(dict(context))
    except _KIDA_ERRORS as exc:
        raise RenderError(name, str(exc)) from exc


def render_template(env: Environment, tpl: Template, config: AppConfig) -> str:
    """Render a page template, wrapped in its layout unless disabled."""
    body = _render(env, tpl.name, tpl.context)
    if not tpl.uses_layout:
        return body

    layout = tpl.layout if isinstance(tpl.layout, str) else config.default_layout
    layout_context = {**tpl.context, "body": Markup(body)}
    return _render(env, config.layout_path(layout), layout_context)


def list_partials(config: AppConfig) -> tuple[str, ...]:
    """Names of the partial templates, as used in ``{% include %}``.

    Sorted, relative to the template directory, e.g.
    ``("partials/footer.html", "partials/header.html")``.
    """
    root = Path(config.template_dir)
    partials = root / config.partials_dir
    if not partials.is_dir():
        return ()
    return tuple(
        sorted(p.relative_to(root).as_posix() for p in partials.rglob("*.html") if p.is_file())
    )
