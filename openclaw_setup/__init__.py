"""openclaw_setup - Deployment harness for the OpenClaw messaging gateway.

Provisions a project directory (secrets file, runtime data tree), drives the
gateway container through Docker Compose v2 and waits for it to come up.
"""

from .compose import CommandResult, ComposeClient
from .config import Colors, Config, get_platform
from .errors import (
    ComposeError,
    CredentialError,
    PrerequisiteError,
    ReadinessTimeout,
    RuntimeDirError,
    SecretsFileError,
    SettingsError,
    SetupError,
)
from .readiness import HttpHealthProbe, LogMarkerProbe, wait_until_ready
from .reset import reset_runtime
from .runtime_dir import InitResult, initialize_runtime_dir
from .secrets_file import TokenResult, ensure_gateway_token, load_into_environment, read_secrets
from .settings import SetupSettings, ValidationResult
from .setup_flow import GatewaySetup, SetupOutcome


__all__ = [
    "Colors",
    "CommandResult",
    "ComposeClient",
    "ComposeError",
    "Config",
    "CredentialError",
    "GatewaySetup",
    "HttpHealthProbe",
    "InitResult",
    "LogMarkerProbe",
    "PrerequisiteError",
    "ReadinessTimeout",
    "RuntimeDirError",
    "SecretsFileError",
    "SettingsError",
    "SetupError",
    "SetupOutcome",
    "SetupSettings",
    "TokenResult",
    "ValidationResult",
    "ensure_gateway_token",
    "get_platform",
    "initialize_runtime_dir",
    "load_into_environment",
    "read_secrets",
    "reset_runtime",
    "wait_until_ready",
]

__version__ = "1.0.0"
