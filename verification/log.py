import sys

from loguru import logger

from config import settings


def configure_logging(level: str = None, json: bool = None) -> None:
    """Replace loguru's default sink with a single stderr sink"""
    level = level or settings.LOG_LEVEL
    json = settings.LOG_JSON if json is None else json

    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=level.upper(), serialize=json)
