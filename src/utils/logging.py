"""Logging helper.

Every module obtains its logger through :func:`get_logger` so that log
lines share one format.  Loggers inside the ``src`` package propagate
to a single package logger that owns the handler; its level defaults
to the ``TGS_LOG_LEVEL`` environment variable (``INFO`` when unset).
Call ``get_logger("src", level)`` to change the level for the whole
package.
"""

import logging
import os
from typing import Optional, Union

PACKAGE_LOGGER = "src"
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _attach_handler(logger: logging.Logger) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(os.environ.get("TGS_LOG_LEVEL", "INFO").upper())


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Return a logger with the planner's handler and format attached."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        _attach_handler(logging.getLogger(PACKAGE_LOGGER))
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(name)
        _attach_handler(logger)
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
