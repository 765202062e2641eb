"""Secrets file (.env) handling for openclaw-setup.

The secrets file holds KEY=VALUE lines: the AI provider API key, the
generated gateway token, and optional image/bind/port overrides read by
docker-compose.yml. This module parses it with python-dotenv and provisions
the gateway token exactly once.
"""

import os
import re
import secrets
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values, load_dotenv

from openclaw_logging import get_logger

from .config import Config
from .errors import SecretsFileError
from .validators import mask_secret


logger = get_logger("secrets")

# 32 random bytes, rendered as 64 hex characters
TOKEN_BYTES = 32


@dataclass
class TokenResult:
    """Outcome of ensure_gateway_token().

    Attributes:
        token: The gateway token now in effect
        generated: True if this run created it
    """

    token: str
    generated: bool


def read_secrets(path: Path) -> dict[str, str]:
    """Parse the secrets file into a dict.

    Keys without a value (a bare ``KEY`` line) map to an empty string.

    Raises:
        SecretsFileError: If the file does not exist or cannot be read
    """
    if not path.is_file():
        raise SecretsFileError(f"{path.name} not found at {path}")

    try:
        values = dotenv_values(path)
    except OSError as e:
        raise SecretsFileError(f"Could not read {path}: {e}")

    return {key: (value or "") for key, value in values.items()}


def generate_token() -> str:
    """Generate a 256-bit gateway token as lowercase hex."""
    return secrets.token_hex(TOKEN_BYTES)


def _key_line_pattern(key: str) -> re.Pattern:
    # Matches "KEY", "KEY=...", "export KEY=..." with optional surrounding spaces
    return re.compile(rf"^\s*(?:export\s+)?{re.escape(key)}\s*(?:=|$)")


def _write_atomic(path: Path, content: str) -> None:
    """Replace path with content, keeping its permission bits."""
    mode = path.stat().st_mode & 0o777
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def set_key_appended(path: Path, key: str, value: str) -> None:
    """Remove every line for key and append KEY=value at the end.

    Other lines, comments and blank lines are preserved in order.
    """
    pattern = _key_line_pattern(key)
    original = path.read_text()
    kept = [line for line in original.splitlines(keepends=True) if not pattern.match(line)]

    content = "".join(kept)
    if content and not content.endswith("\n"):
        content += "\n"
    content += f"{key}={value}\n"

    _write_atomic(path, content)


def ensure_gateway_token(path: Path, key: str = Config.TOKEN_KEY_NAME) -> TokenResult:
    """Make sure the secrets file carries a non-empty gateway token.

    An existing non-empty token is left untouched. Otherwise a new token is
    generated, written back (replacing any empty entry) and exported into
    os.environ for the remaining steps.

    Args:
        path: Secrets file path
        key: Token key name

    Returns:
        TokenResult with the token in effect and whether it was generated
    """
    values = read_secrets(path)
    existing = values.get(key, "")

    if existing:
        logger.debug("Gateway token present", key=key, token=mask_secret(existing))
        return TokenResult(token=existing, generated=False)

    token = generate_token()
    set_key_appended(path, key, token)
    os.environ[key] = token
    logger.info("Generated gateway token", key=key, token=mask_secret(token))
    return TokenResult(token=token, generated=True)


def load_into_environment(path: Path) -> dict[str, str]:
    """Export every secrets file entry into os.environ.

    Values from the file override variables already set in the process, the
    same as sourcing the file with auto-export enabled.

    Returns:
        The parsed values
    """
    load_dotenv(path, override=True)
    values = read_secrets(path)
    logger.debug("Loaded secrets into environment", keys=sorted(values))
    return values
