"""Configuration and constants for openclaw-setup.

This module contains the Config defaults, Colors, and platform detection.
Values that operators may override live in settings.SetupSettings.
"""

import platform
from pathlib import Path


class Colors:
    """ANSI color codes for terminal output"""

    CYAN = "\033[0;36m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    RED = "\033[0;31m"
    NC = "\033[0m"


class Config:
    """File names, service names and defaults"""

    # Files relative to the project directory
    SECRETS_FILE_NAME = ".env"
    SECRETS_EXAMPLE_NAME = ".env.example"
    TEMPLATE_FILE_NAME = "openclaw.template.json"
    SETTINGS_FILE_NAME = "openclaw-setup.yaml"
    RUNTIME_DIR = Path("data") / "openclaw"
    RUNTIME_CONFIG_NAME = "openclaw.json"

    # Layout the gateway expects inside the runtime directory
    RUNTIME_SUBDIRS = (
        Path("workspace"),
        Path("agents") / "main" / "sessions",
        Path("credentials"),
        Path("devices"),
    )

    # uid of the "node" user inside the gateway image
    RUNTIME_UID = 1000
    RUNTIME_DIR_MODE = 0o700
    RUNTIME_CONFIG_MODE = 0o600

    # Compose services and the container whose logs carry the readiness marker
    GATEWAY_SERVICE = "openclaw-gateway"
    CLI_SERVICE = "openclaw-cli"
    GATEWAY_CONTAINER = "openclaw-gateway"

    # Readiness handshake
    READY_MARKER = "listening on ws://"
    READY_ATTEMPTS = 15
    READY_INTERVAL = 2.0
    # Upper bound on a single docker logs read during the readiness loop
    LOGS_TIMEOUT = 10.0

    # Doctor subcommand and post-restart settle time
    DOCTOR_ARGS = ("doctor", "--fix", "--yes")
    DOCTOR_TAIL_LINES = 5
    RESTART_SETTLE_SECONDS = 5.0

    # Secrets file keys
    API_KEY_NAME = "OPENAI_API_KEY"
    API_KEY_PLACEHOLDER = "your-openai"
    TOKEN_KEY_NAME = "OPENCLAW_GATEWAY_TOKEN"
    BIND_IP_KEY = "OPENCLAW_BIND_IP"
    GATEWAY_PORT_KEY = "OPENCLAW_GATEWAY_PORT"
    BRIDGE_PORT_KEY = "OPENCLAW_BRIDGE_PORT"

    DEFAULT_BIND_IP = "127.0.0.1"
    DEFAULT_GATEWAY_PORT = 18789

    # Reset confirmation
    RESET_CONFIRMATION = "yes"

    DOCKER_INSTALL_URL = "https://docs.docker.com/engine/install/"


def get_platform() -> str:
    """Detect platform: linux or macos"""
    system = platform.system().lower()
    if system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    return "unknown"
