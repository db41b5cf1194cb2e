"""Logging setup shared by all components"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "azqr"

_console = Console(stderr=True)


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return a logger under the azqr namespace rendered through rich"""

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = RichHandler(console=_console, show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    if name == ROOT_LOGGER_NAME:
        logger = root
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    if level:
        logger.setLevel(level.upper())

    return logger


def set_verbosity(verbose: bool) -> None:
    """Switch the whole azqr logger tree between INFO and DEBUG"""
    setup_logger(ROOT_LOGGER_NAME, "DEBUG" if verbose else "INFO")
