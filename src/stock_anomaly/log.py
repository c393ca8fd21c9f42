"""Logging setup for command-line use.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, by the CLI, and never on import.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: int | str = logging.INFO) -> None:
    """Route log records to stderr through a Rich handler.

    :param level: Root log level, as a number or a name such as "DEBUG".
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
