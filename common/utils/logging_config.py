"""
Application-wide logging setup.

Modules log through ``logging.getLogger(__name__)``; this only configures
the root handler once at startup.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Send log records to stdout at the given level.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ...). Unknown names fall back to INFO.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    # Motor/pymongo heartbeat chatter
    logging.getLogger("pymongo").setLevel(max(numeric_level, logging.WARNING))
