"""
Shared logger utility for the restaurant pricing advisor.
Provides a consistent logger configuration for all modules.
"""

import logging
import os

DEFAULT_LEVEL = "INFO"


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Returns a logger with the specified name, configured with a standard format.
    The level comes from ``PRICING_LOG_LEVEL`` (INFO when unset or unknown).
    If no name is provided, returns the root logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    level_name = os.getenv("PRICING_LOG_LEVEL", DEFAULT_LEVEL).upper()
    level = logging.getLevelName(level_name)
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    return logger
