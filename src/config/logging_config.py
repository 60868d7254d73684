"""
Centralized logging configuration for the subscription relay.

Provides structured JSON logging with correlation ID support for production observability.
"""

import sys
from pathlib import Path
from typing import Optional
from loguru import logger


def setup_structured_logging(
    level: str = "INFO",
    log_file: Optional[str] = None
) -> None:
    """
    Configure structured JSON logging with Loguru.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file (for local development)

    Returns:
        None (Loguru configures its own handlers)
    """
    # Remove default handler
    logger.remove()

    # serialize=True puts correlation_id and other bound fields in "record.extra"
    logger.add(
        sys.stdout,
        serialize=True,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name} | {message}",
        level=level,
        enqueue=True,
        backtrace=True,
        diagnose=False   # Never dump local variables: they may hold credentials
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            serialize=True,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            compression="zip"
        )

    # Suppress noisy third-party loggers
    logger.disable("httpx")
    logger.disable("httpcore")


def setup_cli_logging(verbose: bool = False) -> None:
    """Plain stderr logging for the command-line client."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | {message}",
        level="DEBUG" if verbose else "WARNING"
    )

