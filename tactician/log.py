"""
Logging setup for the command line and the API server.

Modules log through logging.getLogger(__name__); only entry points
configure handlers.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> int:
    """
    Configure the root logger once.

    The level comes from the argument, then TACTICIAN_LOG_LEVEL, then WARNING.
    Returns the numeric level in effect.
    """
    name = (level or os.getenv("TACTICIAN_LOG_LEVEL") or "WARNING").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {name}")

    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("tactician").setLevel(numeric)
    return numeric
