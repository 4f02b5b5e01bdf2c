"""
Logging setup for bindgen_java.

Modules obtain loggers with ``get_logger(__name__)``; the CLI calls
``setup_logging`` once to attach a rich console handler.
"""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "bindgen_java"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the package hierarchy."""
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: Union[int, str] = logging.WARNING, console: Optional[Console] = None
) -> logging.Logger:
    """
    Configure package logging with a rich handler.

    Calling it again only changes the level.

    Args:
        level: Logging level name or number
        console: Console to log to (defaults to stderr)

    Returns:
        The package root logger
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)
        root.propagate = False
        _configured = True

    return root
