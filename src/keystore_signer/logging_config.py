"""
Logging setup for the keystore signer.

Modules log through ``logging.getLogger(__name__)``; this helper attaches a
single handler to the package logger. Records never contain passwords,
derived keys or seeds.

Usage:
    from keystore_signer.logging_config import configure_logging
    configure_logging("DEBUG")
"""

from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "keystore_signer"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Level name; defaults to the configured ``log_level``
        fmt: Format string for the stream handler

    Returns:
        The package logger
    """
    if level is None:
        from .config import get_default_config
        level = get_default_config().log_level

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, "_keystore_signer", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._keystore_signer = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


# Silent until the application configures logging.
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())

__all__ = ["configure_logging", "PACKAGE_LOGGER"]
