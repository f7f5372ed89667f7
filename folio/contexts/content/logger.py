"""
Content context logger.

Provides logging interface for content context with automatic [content] prefix.
All content modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[content]"


def setup_content_logger(log_dir: Path, source: str = "", console_level: str = "INFO") -> Path:
    """
    Setup logger for content context.

    Args:
        log_dir: Directory for this session
        source: Content source description for provenance (URL or directory)
        console_level: Minimum level shown on the console

    Returns:
        Path to log file

    Example:
        from folio.contexts.content.logger import setup_content_logger, _log_info

        log_file = setup_content_logger(log_dir, source="https://example.com/assets")
        _log_info("Loading posts...")
    """
    return _setup_logger(
        context_name="content",
        log_dir=log_dir,
        extra_provenance={"Content source": source or "(default)"},
        console_level=console_level,
    )


# Wrapper functions with automatic [content] prefix


def _log_info(message: str) -> None:
    """Log info message with [content] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [content] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [content] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [content] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [content] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level content-specific logging helpers


def log_manifest_loaded(language: str, identifiers: list, duplicates: list) -> None:
    """Log the outcome of a manifest fetch."""
    _log_info(f"Manifest for '{language}' lists {len(identifiers)} posts")
    if duplicates:
        _log_warning(f"Manifest for '{language}' repeats identifiers: {', '.join(duplicates)}")


def log_collection_result(language: str, requested: int, loaded: int, elapsed_time: float) -> None:
    """
    Log the result of a collection load.

    Args:
        language: Language code
        requested: Number of identifiers in the manifest
        loaded: Number of posts that loaded successfully
        elapsed_time: Time taken
    """
    if loaded == requested:
        _log_success(f"{language}: loaded {loaded} posts ({elapsed_time:.2f}s)")
    else:
        _log_warning(
            f"{language}: loaded {loaded} of {requested} posts, "
            f"{requested - loaded} skipped ({elapsed_time:.2f}s)"
        )
