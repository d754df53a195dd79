"""
Provides support for logging
"""

import logging
import time
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


def configure_logging(
    level: int | str = logging.WARNING,
    handlers: list[logging.Handler] | None = None,
):
    """
    Configures logging format and log level.

    :param level: default = logging.WARNING. Level names, e.g. "DEBUG", are also accepted.
    :return: None

    - log format: %(asctime)s [%(levelname)s] [%(name)s] %(message)s
    - timestamps are UTC
    - best practice is to retrieve a logger using the class name via `get_logger()`:

    >>> configure_logging(level=logging.DEBUG)
    >>> logger = logging.getLogger('AuctionTxParser')
    >>> logger.info('decoded anyone_bids') # doctest: +SKIP
    2024-06-09 14:48:20,594 [INFO] [AuctionTxParser] decoded anyone_bids

    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"invalid log level: {level}")

    logging.Formatter.converter = time.gmtime
    logging.basicConfig(
        format=LOG_FORMAT,
        level=level,
        handlers=handlers,
        force=True,
    )
    logging.captureWarnings(True)


def get_logger(obj: Any, name: str | None = None) -> logging.Logger:
    """
    Returns a logger using the class name as the logger name.
    If `name` is specifed, then it is appended to the class name: `{self.__class__.__name__}.{name}`
    """
    logger = logging.getLogger(obj.__class__.__name__)
    if name is None:
        return logger

    return logger.getChild(name)
