"""Logging configuration for chatfocus."""
import sys
from pathlib import Path

from loguru import logger


def setup_logging(level: str = "INFO", log_dir: Path = Path("./logs")):
    """Configure logging with console and file handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()

    logger.add(
        sys.stdout,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<level>{message}</level>"
        ),
        level=level,
        colorize=True,
    )

    logger.add(
        log_dir / "chatfocus_{time:YYYY-MM-DD}.log",
        rotation="10 MB",
        retention="7 days",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    )

    # Separate error log
    logger.add(
        log_dir / "errors_{time:YYYY-MM-DD}.log",
        rotation="10 MB",
        retention="30 days",
        level="ERROR",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        backtrace=True,
        diagnose=False,
    )

    logger.debug(f"Logging configured with level: {level}")
