"""
Reusable validation functions for setup values.

Validators return (is_valid, error_message); error_message is None if valid.
"""

import ipaddress
from urllib.parse import urlparse


def validate_non_empty(value: str | None, field_name: str) -> tuple[bool, str | None]:
    """Validate that a value is not empty or None."""
    if value is None:
        return False, f"{field_name} is not set"

    if not value.strip():
        return False, f"{field_name} is empty"

    return True, None


def validate_api_key(key: str | None, placeholder: str) -> tuple[bool, str | None]:
    """Validate the AI provider API key.

    The key must be set and must not still contain the placeholder text
    shipped in .env.example.
    """
    is_valid, error = validate_non_empty(key, "API key")
    if not is_valid:
        return False, error

    if placeholder and placeholder in key:
        return False, "API key is still the placeholder value"

    return True, None


def validate_port(port: int | str) -> tuple[bool, str | None]:
    """Validate a TCP port number."""
    try:
        port_int = int(port)
    except (ValueError, TypeError):
        return False, f"Port must be a number, got: {port}"

    if port_int < 1 or port_int > 65535:
        return False, f"Port must be between 1 and 65535, got: {port_int}"

    return True, None


def validate_bind_ip(value: str) -> tuple[bool, str | None]:
    """Validate an IPv4/IPv6 bind address."""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False, f"Not a valid IP address: {value}"
    return True, None


def validate_url(url: str) -> tuple[bool, str | None]:
    """Validate an http(s) URL."""
    if not url:
        return False, "URL is empty"

    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        return False, f"URL scheme must be http or https, got {parsed.scheme or 'none'}"

    if not parsed.netloc:
        return False, "URL missing host"

    return True, None


def mask_secret(value: str | None, *, visible_chars: int = 4) -> str:
    """Mask a secret value for safe display.

    Returns:
        Masked string like "sk-p****" or "[EMPTY]" if value is empty/None
    """
    if not value:
        return "[EMPTY]"

    if len(value) <= visible_chars:
        return "*" * len(value)

    return value[:visible_chars] + "*" * (len(value) - visible_chars)
