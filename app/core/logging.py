"""
Logging setup for the DevEvent API, built on loguru.

Request handlers and repositories import ``logger`` from here so every record
goes through the same sinks.
"""
import sys
from loguru import logger
from app.core.config import settings

IS_DEVELOPMENT = settings.ENVIRONMENT == "development"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

logger.remove()

logger.add(
    sys.stdout,
    format=CONSOLE_FORMAT,
    level="DEBUG" if IS_DEVELOPMENT else "INFO",
    colorize=True,
    backtrace=IS_DEVELOPMENT,
    diagnose=IS_DEVELOPMENT,
)

# Persist errors and request summaries outside development
if settings.ENVIRONMENT == "production":
    logger.add(
        "logs/devevent.log",
        rotation="100 MB",
        retention="14 days",
        compression="zip",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="INFO",
        enqueue=True,
    )

__all__ = ["logger"]
