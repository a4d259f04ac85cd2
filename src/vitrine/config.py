"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, with typed
fields instead of string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

PACKAGE_DIR = Path(__file__).parent


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=8080, default_layout="alternate.html")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    # Templates
    template_dir: str | Path = PACKAGE_DIR / "templates"
    layouts_dir: str = "layouts"  # Relative to template_dir
    partials_dir: str = "partials"  # Relative to template_dir
    default_layout: str = "main.html"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Static files
    static_dir: str | Path | None = PACKAGE_DIR / "static"
    static_url: str = "/static"
    static_cache_control: str = "public, max-age=3600"

    def layout_path(self, name: str) -> str:
        """Template name for the layout called *name*.

        ``"alternate"`` and ``"alternate.html"`` both resolve to
        ``"layouts/alternate.html"``.
        """
        if "." not in Path(name).name:
            name = f"{name}.html"
        return f"{self.layouts_dir}/{name}"
