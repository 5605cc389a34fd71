# looproute/core/logger.py
from loguru import logger

from looproute.core.config import settings
from looproute.core.logging_config import setup_logging

# Configure logger on first import
setup_logging(settings.LOG_LEVEL)

__all__ = ["logger"]
