"""
Logging configuration for the Blog API.

``setup_logging`` installs the application's console handler (and an
optional file handler) on the root logger and lines the uvicorn
loggers up with the same level, so request logs and post store logs
share one threshold.  The handlers are tagged by name, which makes the
call idempotent without being blocked by handlers that other tools
(pytest's log capture, an embedding server) attached first.
"""

import logging
from pathlib import Path
from typing import List

from .config import Settings

CONSOLE_HANDLER_NAME = "blog_api.console"
FILE_HANDLER_NAME = "blog_api.file"
HANDLER_NAMES = (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME)

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(settings: Settings) -> int:
    """``DEBUG`` mode always logs at DEBUG; otherwise use ``LOG_LEVEL``."""
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def _build_handlers(settings: Settings) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    handlers: List[logging.Handler] = [console_handler]

    if settings.log_file:
        file_handler = logging.FileHandler(Path(settings.log_file).resolve(), encoding="utf-8")
        file_handler.set_name(FILE_HANDLER_NAME)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings) -> bool:
    """Configure logging for ``settings``.

    Returns ``False`` when the application's handlers are already
    installed and nothing was changed.
    """
    root = logging.getLogger()
    if any(handler.get_name() in HANDLER_NAMES for handler in root.handlers):
        return False

    level = resolve_level(settings)
    root.setLevel(level)
    for handler in _build_handlers(settings):
        root.addHandler(handler)

    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(level))
    return True
