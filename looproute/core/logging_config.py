# looproute/core/logging_config.py
from loguru import logger
import sys

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(level: str = "INFO") -> None:
    """
    Configure application-wide logging using loguru.
    """
    # Remove default handler added by loguru (and any previous sink of ours)
    logger.remove()

    logger.add(
        sys.stdout,
        level=level.upper(),
        format=LOG_FORMAT,
        backtrace=True,
        diagnose=False,
    )
