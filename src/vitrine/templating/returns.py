"""Template return type.

Frozen dataclass that route handlers return. The content negotiation
layer inspects it to dispatch to the kida renderer.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Template:
    """Render a kida template, wrapped in a layout.

    *layout* selects the wrapper:

    - ``None`` (default): the app's default layout
    - ``False``: no layout, the template is the whole document
    - a string: a layout file under the layouts directory

    Usage::

        return Template("home.html", title="Home Page")
        return Template("simple.html", layout=False, value1="...")
        return Template("say-name.html", layout="alternate.html", fname=fname)
    """

    name: str
    context: dict[str, Any] = field(default_factory=dict)
    layout: str | bool | None = None

    def __init__(
        self,
        name: str,
        /,
        *,
        layout: str | bool | None = None,
        **context: Any,
    ) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)
        object.__setattr__(self, "layout", layout)

    @property
    def uses_layout(self) -> bool:
        """False when the template renders standalone."""
        return self.layout is not False
