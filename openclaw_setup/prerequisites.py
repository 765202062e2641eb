"""Prerequisite checks run before anything touches the container runtime."""

import shutil
from pathlib import Path

from openclaw_logging import get_logger

from .compose import ComposeClient
from .config import Config
from .errors import CredentialError, PrerequisiteError, SecretsFileError
from .output import success
from .validators import mask_secret, validate_api_key


logger = get_logger("prerequisites")


def check_docker(docker: str = "docker") -> str:
    """Ensure the docker CLI is on PATH.

    Returns:
        Resolved path to the executable
    """
    path = shutil.which(docker)
    if path is None:
        raise PrerequisiteError(
            "Docker is not installed.",
            hint=f"Install: {Config.DOCKER_INSTALL_URL}",
        )
    logger.debug("Found docker", path=path)
    return path


def check_compose(client: ComposeClient) -> None:
    """Ensure the Compose v2 plugin answers ``docker compose version``."""
    result = client.version()
    if not result.success:
        raise PrerequisiteError(
            "Docker Compose v2 not found.",
            hint="Update Docker or install the Compose plugin.",
        )
    logger.debug("Compose available", version=result.stdout.strip())


def check_secrets_file(secrets_file: Path, example_file: Path) -> None:
    """Ensure the secrets file exists, pointing at the example if there is one."""
    if secrets_file.is_file():
        return

    if example_file.is_file():
        hint = (
            "Create it from the template:\n"
            f"       cp {example_file.name} {secrets_file.name}\n"
            f"       Then fill in {Config.API_KEY_NAME} and re-run this script."
        )
    else:
        hint = (
            "Create it with at minimum:\n"
            f"       {Config.API_KEY_NAME}=sk-proj-your-key-here"
        )
    raise SecretsFileError(f"{secrets_file.name} not found.", hint=hint)


def check_api_key(values: dict[str, str]) -> str:
    """Ensure the API key is set and is not the shipped placeholder.

    Returns:
        The API key
    """
    key = values.get(Config.API_KEY_NAME, "")
    is_valid, error = validate_api_key(key, Config.API_KEY_PLACEHOLDER)
    if not is_valid:
        logger.debug("API key rejected", reason=error, value=mask_secret(key))
        raise CredentialError(
            f"{Config.API_KEY_NAME} is missing or still a placeholder in {Config.SECRETS_FILE_NAME}",
            hint=error,
        )
    return key


def check_container_runtime(client: ComposeClient) -> None:
    """Docker binary plus Compose plugin, with operator feedback."""
    check_docker(client.docker)
    check_compose(client)
    success("Docker and Docker Compose v2 available.")
