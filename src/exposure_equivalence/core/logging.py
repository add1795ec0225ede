"""
Logging for the exposure equivalence engine.

The package is a library: it emits records under the ``exposure_equivalence``
logger and leaves output to the host application. Nothing is printed unless
the application configures handlers, or calls ``setup_logging`` for a quick
stderr console.

Usage:
    from exposure_equivalence.core.logging import get_logger

    logger = get_logger(__name__)
    logger.warning("Cannot solve", extra={"parameter": "aperture"})
"""

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "exposure_equivalence"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace.

    Args:
        name: Logger name (typically __name__).
    """
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Handler:
    """Attach a plain console handler to the package logger.

    Opt-in for scripts and notebooks. Calling it again swaps the handler
    instead of stacking a second one.

    Args:
        level: Log level name. Defaults to ``Settings.log_level``.
        stream: Output stream. Defaults to stderr.

    Returns:
        The installed handler.
    """
    from exposure_equivalence.config import get_settings

    level = (level or get_settings().log_level).upper()
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_exposure_console", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._exposure_console = True
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


class LoggingMixin:
    """Mixin class providing a ``logger`` property named after the module."""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__module__)
