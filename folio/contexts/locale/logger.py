"""
Locale context logger.

Provides logging interface for locale context with automatic [locale] prefix.
All locale modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[locale]"


def _log_error(message: str) -> None:
    """Log error message with [locale] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [locale] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
