"""
SetupLogger - Structured diagnostic logging for openclaw-setup.

Operator-facing messages go through openclaw_setup.output. This logger
records what the tool actually did (commands, exit codes, timings) for
debugging, on stderr at the configured level and optionally in a JSON file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .formatters import ConsoleFormatter, JsonFormatter


SERVICE_NAME = "openclaw-setup"


class SetupLogger:
    """Structured logger with keyword fields.

    Usage:
        from openclaw_logging import get_logger

        logger = get_logger("compose")
        logger.debug("Command finished", returncode=0, duration_ms=12.5)
    """

    def __init__(self, name: str, level: int | str = logging.WARNING):
        """Initialize the logger.

        Args:
            name: Logger name (module or subsystem)
            level: Log level (default WARNING)
        """
        self.name = name
        self._logger = logging.getLogger(f"{SERVICE_NAME}.{name}")
        self._logger.setLevel(_coerce_level(level))
        self._logger.propagate = False

    def _ensure_handlers(self) -> None:
        """Attach the console handler on first use."""
        # RotatingFileHandler subclasses StreamHandler, so compare exact types
        if any(type(h) is logging.StreamHandler for h in self._logger.handlers):
            return

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(ConsoleFormatter())
        self._logger.addHandler(console_handler)

    def _log(self, level: int, msg: str, *args: Any, **fields: Any) -> None:
        self._ensure_handlers()
        self._logger.log(level, msg, *args, extra=fields)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def set_level(self, level: int | str) -> None:
        self._logger.setLevel(_coerce_level(level))

    def add_file_handler(
        self,
        log_file: str | Path,
        level: int = logging.DEBUG,
        max_bytes: int = 5 * 1024 * 1024,  # 5 MB
        backup_count: int = 3,
    ) -> None:
        """Add a rotating file handler with JSON formatting.

        Args:
            log_file: Path to the log file
            level: Log level for the file handler
            max_bytes: Max file size before rotation
            backup_count: Number of rotated files to keep
        """
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        for handler in self._logger.handlers:
            if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == log_file.resolve():
                return

        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        file_handler.setLevel(level)
        file_handler.setFormatter(JsonFormatter(service=SERVICE_NAME))
        self._logger.addHandler(file_handler)


# Logger registry for singleton behavior
_loggers: dict[str, SetupLogger] = {}

# Settings applied to every logger, including ones created later
_global_level: int = logging.WARNING
_global_log_file: Path | None = None


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def get_logger(name: str) -> SetupLogger:
    """Get or create a logger by name.

    Loggers are cached and pick up the level and log file set through
    configure_logging().
    """
    if name not in _loggers:
        logger = SetupLogger(name, _global_level)
        if _global_log_file is not None:
            logger.add_file_handler(_global_log_file)
        _loggers[name] = logger

    return _loggers[name]


def configure_logging(level: int | str = logging.WARNING, log_file: str | Path | None = None) -> None:
    """Apply a level and optional JSON log file to all loggers.

    Args:
        level: Console and logger level (default WARNING keeps the terminal quiet)
        log_file: Optional path for a rotating JSON log
    """
    global _global_level, _global_log_file

    _global_level = _coerce_level(level)
    _global_log_file = Path(log_file) if log_file else None

    for logger in _loggers.values():
        logger.set_level(_global_level)
        if _global_log_file is not None:
            logger.add_file_handler(_global_log_file)


def reset_logging() -> None:
    """Close all handlers and restore the default level.

    Cached loggers stay registered since modules hold references to them.
    """
    global _global_level, _global_log_file

    _global_level = logging.WARNING
    _global_log_file = None
    for logger in _loggers.values():
        for handler in logger._logger.handlers[:]:
            logger._logger.removeHandler(handler)
            handler.close()
        logger.set_level(_global_level)
