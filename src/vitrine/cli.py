"""Vitrine CLI — start the demo server.

Entry point registered as ``vitrine`` in ``pyproject.toml``::

    [project.scripts]
    vitrine = "vitrine.cli:main"

Usage::

    vitrine            # port 3000
    vitrine 8080
    python -m vitrine 8080 --debug
"""

import argparse
import logging
import re
from dataclasses import replace

DEFAULT_PORT = 3000

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEADING_INT = re.compile(r"\s*\+?(\d+)")


def parse_port(value: str | None) -> int:
    """Port from the command line; 3000 when absent or not a number.

    Leading digits are used, after an optional ``+`` (``"8080abc"`` and
    ``"+8080"`` both give 8080). Zero and values above 65535 fall back
    to the default.
    """
    if value is None:
        return DEFAULT_PORT
    found = _LEADING_INT.match(value)
    if found is None:
        return DEFAULT_PORT
    port = int(found.group(1))
    if not 0 < port <= 65535:
        return DEFAULT_PORT
    return port


def configure_logging(debug: bool = False) -> None:
    """Send vitrine's operational log to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``vitrine`` command."""
    parser = argparse.ArgumentParser(
        prog="vitrine",
        description="Vitrine — layouts, partials, and helpers served over ASGI.",
    )
    parser.add_argument(
        "port",
        nargs="?",
        default=None,
        help=f"Port to listen on (default {DEFAULT_PORT})",
    )
    parser.add_argument("--host", default=None, help="Bind host address")
    parser.add_argument("--debug", action="store_true", help="Verbose logging and auto-reload")

    args = parser.parse_args(argv)
    configure_logging(args.debug)

    from vitrine.config import AppConfig
    from vitrine.site import create_app

    config = AppConfig(port=parse_port(args.port), debug=args.debug)
    if args.host:
        config = replace(config, host=args.host)

    create_app(config).run()
