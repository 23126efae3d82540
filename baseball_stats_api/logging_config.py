"""Logging setup for the API service.

Every module logs through `logging.getLogger(__name__)`; this helper is the
single place where handlers and the line format are configured, and it is
called once from the application entrypoint.
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG"). Unknown names fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
