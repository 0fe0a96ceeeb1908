"""Centralized logging configuration for the backend

Console output plus rotated api/error/debug files. Every record passes
through a patcher that masks anything shaped like an API key, since users
paste their own credentials into the client page.
"""
import re
import sys
from pathlib import Path
from loguru import logger
from backend.config import settings

_SECRET_PATTERN = re.compile(r"\b(sk-[A-Za-z0-9_\-]{4})[A-Za-z0-9_\-]{8,}")


def mask_secrets(text: str) -> str:
    """Replace API-key-like tokens with a short masked prefix"""
    return _SECRET_PATTERN.sub(r"\1****", text)


def _scrub_record(record):
    record["message"] = mask_secrets(record["message"])


def setup_logging(log_level: str = None):
    """Configure logging with rotation and formatting

    Args:
        log_level: Optional log level override (DEBUG, INFO, WARNING, ERROR)
                  If not provided, uses settings.log_level
    """
    level = log_level or settings.log_level

    logger.remove()
    logger.configure(patcher=_scrub_record)

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        sys.stdout,
        format=settings.log_format,
        level=level,
        colorize=True
    )

    logger.add(
        log_dir / "api.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        level="INFO",
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        compression="zip",
        enqueue=True
    )

    logger.add(
        log_dir / "error.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="ERROR",
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        compression="zip",
        enqueue=True,
        backtrace=True,
        diagnose=False
    )

    # Debug file only when running at DEBUG
    if level == "DEBUG":
        logger.add(
            log_dir / "debug.log",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            compression="zip",
            enqueue=True
        )

    logger.info(f"Logging initialized | dir={log_dir.absolute()} | level={level}")


def get_logger(name: str):
    """Get a logger bound to a module name

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    return logger.bind(name=name)
