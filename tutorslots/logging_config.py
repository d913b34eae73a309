"""Logging configuration helpers."""

import logging

from rich.logging import RichHandler


def configure_logging(level: str = "WARNING") -> None:
    """Configure application logging with a single rich handler."""
    logger = logging.getLogger("tutorslots")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = RichHandler(show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
