"""Output utilities for openclaw-setup.

Operator-facing messages. Diagnostic detail goes to openclaw_logging instead.
"""

import os
import re
import sys

from .config import Colors


_ANSI_RE = re.compile(r"\033\[[0-9;]+m")


def _use_colors(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _emit(prefix: str, color: str, msg: str, stream=None) -> None:
    stream = stream or sys.stdout
    text = f"{color}{prefix}{Colors.NC} {msg}"
    if not _use_colors(stream):
        text = _ANSI_RE.sub("", text)
    print(text, file=stream)


def info(msg: str) -> None:
    _emit("[INFO] ", Colors.CYAN, msg)


def success(msg: str) -> None:
    _emit("[OK]   ", Colors.GREEN, msg)


def warn(msg: str) -> None:
    _emit("[WARN] ", Colors.YELLOW, msg)


def error(msg: str) -> None:
    """Show error message on stderr."""
    _emit("[ERROR]", Colors.RED, msg, stream=sys.stderr)


def header(title: str) -> None:
    """Print a banner block."""
    rule = "=" * 40
    print()
    print(rule)
    print(f"   {title}")
    print(rule)
    print()
