# memobbs/logging/setup.py
"""Process-wide stdlib logging configuration."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once and set the level of the ``memobbs`` loggers."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("memobbs").setLevel(level.upper())
