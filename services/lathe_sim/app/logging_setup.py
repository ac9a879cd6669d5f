from __future__ import annotations
import logging
import sys
from typing import IO, Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "lathe_sim"


def _console_handler() -> Optional[logging.StreamHandler]:
    for h in logging.getLogger().handlers:
        if h.get_name() == HANDLER_NAME and isinstance(h, logging.StreamHandler):
            return h
    return None


def configure_logging(level: str = "DEBUG") -> None:
    """
    Install a single console handler on the root logger (idempotent).
    """
    root = logging.getLogger()
    if _console_handler() is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler.set_name(HANDLER_NAME)
        root.addHandler(handler)
    root.setLevel(level)


def redirect_console_logging(stream: IO[str]) -> Optional[IO[str]]:
    """
    Point the console handler at another stream. Returns the previous stream,
    or None when configure_logging() has not installed the handler.
    """
    handler = _console_handler()
    if handler is None:
        return None
    previous = handler.stream
    handler.setStream(stream)
    return previous
