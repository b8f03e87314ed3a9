from __future__ import annotations

import logging
import sys
from typing import Optional

DEFAULT_LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_root_logger_name = "axsim"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``axsim`` namespace (no handlers are attached here)."""
    if not name:
        return logging.getLogger(_root_logger_name)
    if name == "__main__":
        name = f"{_root_logger_name}.main"
    elif not name.startswith(_root_logger_name):
        name = f"{_root_logger_name}.{name}"
    return logging.getLogger(name)


def configure_logging(level: Optional[str] = None, debug: bool = False) -> logging.Logger:
    """Attach a console handler to the ``axsim`` logger.

    ``debug`` only lowers the level to DEBUG; it has no effect on results.
    Calling it again replaces the handler.
    """
    if debug:
        numeric_level = logging.DEBUG
    elif level is None:
        numeric_level = DEFAULT_LOG_LEVEL
    else:
        numeric_level = getattr(logging, str(level).upper(), DEFAULT_LOG_LEVEL)

    logger = logging.getLogger(_root_logger_name)
    logger.setLevel(numeric_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
