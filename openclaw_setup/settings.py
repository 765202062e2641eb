"""
Settings for a single openclaw-setup run.

Settings are resolved once, in this order (later wins):
1. Built-in defaults from Config
2. openclaw-setup.yaml in the project directory
3. Environment variables (OPENCLAW_READY_ATTEMPTS, OPENCLAW_SETUP_LOG_LEVEL, ...)

The resulting SetupSettings object is passed explicitly to every step.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .config import Config
from .errors import SettingsError
from .validators import validate_url


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigStatus(Enum):
    """Status of settings validation."""

    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ValidationResult:
    """Result of validating settings.

    Attributes:
        status: Overall validation status
        errors: Problems that make the settings unusable
        warnings: Problems worth reporting that do not block setup
    """

    status: ConfigStatus
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status == ConfigStatus.VALID

    @classmethod
    def valid(cls, warnings: list[str] | None = None) -> "ValidationResult":
        return cls(status=ConfigStatus.VALID, warnings=warnings or [])

    @classmethod
    def invalid(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        return cls(status=ConfigStatus.INVALID, errors=errors, warnings=warnings or [])


def _safe_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        raise SettingsError(f"Expected an integer, got: {value!r}")


def _safe_float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        raise SettingsError(f"Expected a number, got: {value!r}")


def _safe_bool(value: Any, default: bool = False) -> bool:
    """Parse true/false/yes/no/1/0/on/off (case-insensitive)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    value_lower = str(value).lower().strip()
    if value_lower in ("true", "yes", "1", "on"):
        return True
    if value_lower in ("false", "no", "0", "off"):
        return False
    return default


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, or {} if the file does not exist.

    Raises:
        SettingsError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Could not parse {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"{path} must contain a mapping at the top level")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a top-level YAML section, or {} if it is absent or empty."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise SettingsError(f"{name} must be a mapping, got: {section!r}")
    return section


@dataclass
class SetupSettings:
    """Everything a setup or reset run needs to know.

    Attributes:
        project_dir: Directory holding docker-compose.yml, .env and the template
        gateway_service: Compose service running the gateway
        cli_service: Compose service used for the doctor subcommand
        gateway_container: Container name whose logs carry the readiness marker
        ready_marker: Substring that signals the gateway accepts connections
        ready_attempts: Maximum number of readiness checks
        ready_interval: Seconds between readiness checks
        health_url: Optional HTTP endpoint used instead of the log marker
        settle_seconds: Pause after the post-doctor restart
        runtime_uid: Owner uid applied to the runtime directory on Linux
        log_level: Diagnostic log level
        log_file: Optional JSON log file
        timing: Print a per-step timing summary at the end
    """

    project_dir: Path = field(default_factory=Path.cwd)
    gateway_service: str = Config.GATEWAY_SERVICE
    cli_service: str = Config.CLI_SERVICE
    gateway_container: str = Config.GATEWAY_CONTAINER
    ready_marker: str = Config.READY_MARKER
    ready_attempts: int = Config.READY_ATTEMPTS
    ready_interval: float = Config.READY_INTERVAL
    health_url: str | None = None
    settle_seconds: float = Config.RESTART_SETTLE_SECONDS
    runtime_uid: int = Config.RUNTIME_UID
    log_level: str = "WARNING"
    log_file: Path | None = None
    timing: bool = False

    @property
    def secrets_file(self) -> Path:
        return self.project_dir / Config.SECRETS_FILE_NAME

    @property
    def secrets_example(self) -> Path:
        return self.project_dir / Config.SECRETS_EXAMPLE_NAME

    @property
    def template_file(self) -> Path:
        return self.project_dir / Config.TEMPLATE_FILE_NAME

    @property
    def runtime_dir(self) -> Path:
        return self.project_dir / Config.RUNTIME_DIR

    @property
    def max_wait_seconds(self) -> float:
        """Wall-clock budget of the readiness loop."""
        return max(self.ready_attempts, 0) * self.ready_interval

    def validate(self) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        if not self.project_dir.is_dir():
            errors.append(f"project_dir: {self.project_dir} is not a directory")

        for name in ("gateway_service", "cli_service", "gateway_container", "ready_marker"):
            if not getattr(self, name).strip():
                errors.append(f"{name} is empty")

        if self.ready_attempts < 1:
            errors.append(f"ready_attempts must be at least 1, got {self.ready_attempts}")
        if self.ready_interval < 0:
            errors.append(f"ready_interval must not be negative, got {self.ready_interval}")
        if self.settle_seconds < 0:
            errors.append(f"settle_seconds must not be negative, got {self.settle_seconds}")

        if self.health_url:
            is_valid, error = validate_url(self.health_url)
            if not is_valid:
                errors.append(f"health_url: {error}")

        if self.log_level not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level}")

        if self.max_wait_seconds > 600:
            warnings.append(
                f"Readiness wait of {self.max_wait_seconds:.0f}s is unusually long"
            )

        if errors:
            return ValidationResult.invalid(errors, warnings)
        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_dir": str(self.project_dir),
            "gateway_service": self.gateway_service,
            "cli_service": self.cli_service,
            "gateway_container": self.gateway_container,
            "ready_marker": self.ready_marker,
            "ready_attempts": self.ready_attempts,
            "ready_interval": self.ready_interval,
            "health_url": self.health_url,
            "settle_seconds": self.settle_seconds,
            "runtime_uid": self.runtime_uid,
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else None,
            "timing": self.timing,
        }

    @classmethod
    def load(
        cls,
        project_dir: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "SetupSettings":
        """Resolve settings from defaults, openclaw-setup.yaml and the environment.

        Args:
            project_dir: Project directory (default: $OPENCLAW_PROJECT_DIR or cwd)
            environ: Environment mapping (default: os.environ)

        Raises:
            SettingsError: If a file or override cannot be parsed
        """
        env = os.environ if environ is None else environ

        if project_dir is None:
            project_dir = Path(env.get("OPENCLAW_PROJECT_DIR") or Path.cwd())
        settings = cls(project_dir=Path(project_dir).expanduser().resolve())

        data = load_yaml_file(settings.project_dir / Config.SETTINGS_FILE_NAME)
        services = _section(data, "services")
        readiness = _section(data, "readiness")
        doctor = _section(data, "doctor")
        runtime = _section(data, "runtime")
        logging_cfg = _section(data, "logging")

        settings.gateway_service = str(services.get("gateway", settings.gateway_service))
        settings.cli_service = str(services.get("cli", settings.cli_service))
        settings.gateway_container = str(services.get("container", settings.gateway_container))
        settings.ready_marker = str(readiness.get("marker", settings.ready_marker))
        settings.ready_attempts = _safe_int(readiness.get("attempts"), settings.ready_attempts)
        settings.ready_interval = _safe_float(readiness.get("interval"), settings.ready_interval)
        settings.health_url = str(readiness["health_url"]) if readiness.get("health_url") else None
        settings.settle_seconds = _safe_float(doctor.get("settle_seconds"), settings.settle_seconds)
        settings.runtime_uid = _safe_int(runtime.get("uid"), settings.runtime_uid)
        settings.log_level = str(logging_cfg.get("level", settings.log_level)).upper()
        if logging_cfg.get("file"):
            settings.log_file = settings.project_dir / str(logging_cfg["file"])
        settings.timing = _safe_bool(data.get("timing"), settings.timing)

        # Environment overrides
        settings.ready_attempts = _safe_int(env.get("OPENCLAW_READY_ATTEMPTS"), settings.ready_attempts)
        settings.ready_interval = _safe_float(env.get("OPENCLAW_READY_INTERVAL"), settings.ready_interval)
        if env.get("OPENCLAW_HEALTH_URL"):
            settings.health_url = env["OPENCLAW_HEALTH_URL"]
        if env.get("OPENCLAW_SETUP_LOG_LEVEL"):
            settings.log_level = env["OPENCLAW_SETUP_LOG_LEVEL"].upper()
        if env.get("OPENCLAW_SETUP_LOG_FILE"):
            settings.log_file = Path(env["OPENCLAW_SETUP_LOG_FILE"]).expanduser()
        settings.timing = _safe_bool(env.get("OPENCLAW_SETUP_TIMING"), settings.timing)

        return settings
