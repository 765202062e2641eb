"""
openclaw_logging - Diagnostic logging for openclaw-setup.

Usage:
    from openclaw_logging import configure_logging, get_logger

    configure_logging(level="DEBUG", log_file="setup.log")

    logger = get_logger("compose")
    logger.debug("Running command", command="docker compose pull")
"""

from .formatters import ConsoleFormatter, JsonFormatter
from .logger import SetupLogger, configure_logging, get_logger, reset_logging


__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "SetupLogger",
    "configure_logging",
    "get_logger",
    "reset_logging",
]
