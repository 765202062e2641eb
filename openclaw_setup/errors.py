"""Exceptions for openclaw-setup.

Every fatal condition raises a SetupError subclass. The CLI prints the
message and hint, then exits with status 1.
"""


class SetupError(Exception):
    """Base class for fatal setup failures."""

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


class PrerequisiteError(SetupError):
    """Raised when docker or the compose plugin is unavailable."""


class SecretsFileError(SetupError):
    """Raised when the secrets file is missing or unreadable."""


class CredentialError(SetupError):
    """Raised when the API credential is missing or still a placeholder."""


class SettingsError(SetupError):
    """Raised when openclaw-setup.yaml or an override is invalid."""


class RuntimeDirError(SetupError):
    """Raised when the runtime directory cannot be initialized."""


class ComposeError(SetupError):
    """Raised when a docker compose command fails."""


class ReadinessTimeout(SetupError):
    """Raised when the gateway never reports ready within the attempt budget."""
