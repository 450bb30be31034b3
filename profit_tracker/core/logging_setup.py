"""Logging setup for the API process."""

import logging
import sys

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx")


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger with a single console handler.

    Safe to call more than once; existing handlers are replaced.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
