"""Logging setup shared by every module."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
PACKAGE_LOGGER = "flownlp"


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def configure_logging(level: str) -> None:
    """Set the level of the package logger (e.g. from settings.LOG_LEVEL)."""
    _package_logger().setLevel(level.upper())


def setup_logger(name: str) -> logging.Logger:
    """Return a logger that writes through the package handler."""
    _package_logger()
    return logging.getLogger(name)
