"""Structured logging configuration."""

import sys
from pathlib import Path
from typing import Any, Optional

import psutil
from loguru import logger


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure structured logging with console and file output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file
        rotation: Log rotation size
        retention: Log retention period
    """
    # Remove default handler
    logger.remove()

    # Console handler with colors
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
        level=log_level,
        colorize=True,
    )

    # File handler if specified
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message} | {extra}",
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )


def get_logger(name: str, **context: Any) -> Any:
    """
    Get a logger instance with optional context.

    Args:
        name: Logger name (typically __name__)
        **context: Additional context fields (request_id, stage, etc.)

    Returns:
        Logger instance with bound context
    """
    if context:
        return logger.bind(name=name, **context)
    return logger.bind(name=name)


def log_memory(log: Any, stage: str) -> None:
    """Log resident memory of the serving process at a pipeline checkpoint."""
    rss = psutil.Process().memory_info().rss
    log.debug(f"[MEM {stage}] rss={rss / 1024 / 1024:.1f}MB")


# Initialize logging on import
setup_logging()
