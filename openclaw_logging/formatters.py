"""
Log formatters for openclaw_logging.

JsonFormatter writes one object per line to the optional log file;
ConsoleFormatter renders the same records on the operator's terminal.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


# Attributes every LogRecord carries; anything else arrived through extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def extract_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the keyword fields that were passed to the log call."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


def _subsystem(record: logging.LogRecord) -> str:
    # "openclaw-setup.compose" -> "compose"
    return record.name.rpartition(".")[2]


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Output format:
        {"timestamp": "2026-10-16T12:34:56.789Z", "severity": "INFO",
         "service": "openclaw-setup", "logger": "compose",
         "message": "Command finished", "fields": {"returncode": 0}}

    Records at WARNING and above also carry "source" as path:line.
    """

    def __init__(self, service: str = "openclaw-setup"):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "severity": record.levelname,
            "service": self.service,
            "logger": _subsystem(record),
            "message": record.getMessage(),
        }

        fields = extract_fields(record)
        if fields:
            entry["fields"] = fields

        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.pathname}:{record.lineno}"

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line records for stderr.

    Output format:
        12:34:56 DEBUG   compose: Running command (command=docker compose version)
    """

    LEVEL_COLORS = {
        logging.DEBUG: "36",
        logging.INFO: "32",
        logging.WARNING: "33",
        logging.ERROR: "31",
    }

    def __init__(self, use_colors: bool | None = None, show_fields: bool = True):
        """
        Args:
            use_colors: ANSI colors on the level name (default: stderr is a TTY and NO_COLOR unset)
            show_fields: Append keyword fields in parentheses
        """
        super().__init__()
        if use_colors is None:
            use_colors = hasattr(sys.stderr, "isatty") and sys.stderr.isatty() and not os.environ.get("NO_COLOR")
        self.use_colors = use_colors
        self.show_fields = show_fields

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<7}"
        if self.use_colors:
            level = f"\033[{self.LEVEL_COLORS.get(record.levelno, '0')}m{level}\033[0m"

        line = f"{datetime.fromtimestamp(record.created):%H:%M:%S} {level} {_subsystem(record)}: {record.getMessage()}"

        if self.show_fields:
            fields = extract_fields(record)
            if fields:
                line += " (" + " ".join(f"{key}={value}" for key, value in fields.items()) + ")"

        return line
