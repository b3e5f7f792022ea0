"""
Logging setup shared by the API and scripts.
"""

import logging

from core.config import LOG_FORMAT, LOG_LEVEL


def configure_logging(level: str | None = None) -> None:
    """Apply the configured level and format to the root logger."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
