"""
================================================================================
Logging Configuration
================================================================================

Centralized Loguru setup for the harness: console sink plus an optional
rotating file sink, both driven by the `logging.*` configuration keys.

Usage:
    from acceptance.framework.logging_config import init_logger

    init_logger(ConfigLoader(), level="DEBUG")

================================================================================
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config_loader import ConfigLoader


DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"

_logger_initialized: bool = False


def init_logger(
    config: Optional[ConfigLoader] = None,
    level: Optional[str] = None,
    format_str: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Initialize the global Loguru logger.

    Args:
        config: Configuration source (defaults to the ConfigLoader singleton)
        level: Log level overriding `logging.level`
        format_str: Log format overriding `logging.format`
        force: Re-initialize even if already configured
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    config = config or ConfigLoader()
    log_level = (level or config.get("logging.level", "INFO")).upper()
    log_format = format_str or config.get("logging.format", DEFAULT_FORMAT)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = config.get("logging.file", None)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


__all__ = [
    "init_logger",
]
