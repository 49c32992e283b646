from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "httpcontract"


def configure_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """
    Attach a rich handler to the package logger. Library code only ever calls
    logging.getLogger(__name__); installing handlers is left to entry points.
    """
    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(numeric_level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console or Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
        logger.addHandler(handler)
    return logger
