"""Setup pipeline for the OpenClaw gateway.

Steps run strictly in order and stop at the first SetupError:

1. Prerequisites: docker, compose plugin, .env, API key
2. Gateway token: generated once and written back to .env
3. Runtime directory: created and seeded on first run only
4. Pull and start the gateway, then wait for the readiness marker
5. First run only: doctor --fix, then restart the gateway

Every step except the container start is a no-op on a second run, so the
whole pipeline is safe to re-run after a failure.
"""

import os
import time
from collections.abc import Callable
from dataclasses import dataclass

from openclaw_logging import get_logger

from .compose import ComposeClient
from .config import Config
from .errors import SettingsError
from .output import header, info, success, warn
from .prerequisites import check_api_key, check_container_runtime, check_secrets_file
from .readiness import HttpHealthProbe, LogMarkerProbe, wait_until_ready
from .runtime_dir import InitResult, initialize_runtime_dir
from .secrets_file import ensure_gateway_token, load_into_environment, read_secrets
from .settings import SetupSettings
from .timing import StepTimer
from .validators import validate_bind_ip, validate_port


logger = get_logger("setup")


@dataclass
class SetupOutcome:
    """What a completed setup run produced."""

    token: str
    token_generated: bool
    first_run: bool
    bind_ip: str
    port: int
    doctor_ok: bool | None = None


def _gateway_address(values: dict[str, str]) -> tuple[str, int]:
    """Resolve and validate bind IP and gateway port from the secrets file."""
    bind_ip = values.get(Config.BIND_IP_KEY) or Config.DEFAULT_BIND_IP
    port = values.get(Config.GATEWAY_PORT_KEY) or str(Config.DEFAULT_GATEWAY_PORT)
    bridge_port = values.get(Config.BRIDGE_PORT_KEY)

    errors = []
    is_valid, error = validate_bind_ip(bind_ip)
    if not is_valid:
        errors.append(f"{Config.BIND_IP_KEY}: {error}")
    is_valid, error = validate_port(port)
    if not is_valid:
        errors.append(f"{Config.GATEWAY_PORT_KEY}: {error}")
    if bridge_port:
        is_valid, error = validate_port(bridge_port)
        if not is_valid:
            errors.append(f"{Config.BRIDGE_PORT_KEY}: {error}")

    if errors:
        raise SettingsError(
            f"Invalid network overrides in {Config.SECRETS_FILE_NAME}",
            hint="; ".join(errors),
        )
    return bind_ip, int(port)


class GatewaySetup:
    """Runs the setup pipeline against one project directory."""

    def __init__(
        self,
        settings: SetupSettings,
        client: ComposeClient | None = None,
        sleep: Callable[[float], None] = time.sleep,
        timer: StepTimer | None = None,
    ):
        self.settings = settings
        self.client = client or ComposeClient(settings.project_dir)
        self.sleep = sleep
        self.timer = timer or StepTimer(enabled=settings.timing)

    def check_prerequisites(self) -> dict[str, str]:
        """Runtime, secrets file and API key. Nothing is modified here.

        Returns:
            Parsed secrets file values
        """
        info("Checking prerequisites...")
        check_container_runtime(self.client)

        info(f"Checking {Config.SECRETS_FILE_NAME} file...")
        check_secrets_file(self.settings.secrets_file, self.settings.secrets_example)
        values = read_secrets(self.settings.secrets_file)
        check_api_key(values)
        success(f"{Config.API_KEY_NAME} is set.")
        return values

    def provision_token(self) -> tuple[str, bool, dict[str, str]]:
        """Ensure the gateway token exists, then export the whole file."""
        result = ensure_gateway_token(self.settings.secrets_file)
        if result.generated:
            success("Generated gateway token.")
        else:
            success("Gateway token exists.")

        values = load_into_environment(self.settings.secrets_file)
        return result.token, result.generated, values

    def prepare_runtime_dir(self) -> InitResult:
        info("Preparing runtime data directory...")
        result = initialize_runtime_dir(
            self.settings.runtime_dir,
            self.settings.template_file,
            uid=self.settings.runtime_uid,
        )
        rel = os.path.relpath(result.path, self.settings.project_dir)
        if result.first_run:
            success(f"Created {rel}/ with config template.")
        else:
            success(f"{rel}/ already exists (preserving existing data).")
        return result

    def _probe(self):
        if self.settings.health_url:
            return HttpHealthProbe(self.settings.health_url)
        return LogMarkerProbe(self.client, self.settings.gateway_container, self.settings.ready_marker)

    def start_gateway(self) -> int:
        """Pull, start and wait for the gateway.

        Returns:
            Attempt number on which readiness was observed
        """
        service = self.settings.gateway_service

        info("Pulling OpenClaw Docker image...")
        self.client.pull(service)
        success("Image pulled.")

        info("Starting OpenClaw gateway...")
        self.client.up(service)

        info("Waiting for gateway to start...")
        attempt = wait_until_ready(
            self._probe(),
            self.settings.ready_attempts,
            self.settings.ready_interval,
            container=self.settings.gateway_container,
            sleep=self.sleep,
        )
        success("Gateway is running.")
        return attempt

    def run_doctor(self) -> bool:
        """Run ``doctor --fix --yes`` and restart the gateway.

        A failing doctor is reported as a warning; the restart happens either way.

        Returns:
            True if the doctor exited cleanly
        """
        info("Running doctor to validate and finalize config...")
        result = self.client.run_once(self.settings.cli_service, Config.DOCTOR_ARGS)
        for line in result.tail(Config.DOCTOR_TAIL_LINES):
            print(f"    {line}")

        if result.success:
            success("Config validated by doctor.")
        else:
            warn("Doctor had warnings (non-fatal).")
            logger.warning("Doctor exited non-zero", returncode=result.returncode)

        self.client.restart(self.settings.gateway_service)
        self.sleep(self.settings.settle_seconds)
        return result.success

    def run(self) -> SetupOutcome:
        """Run every step in order.

        Raises:
            SetupError: On the first fatal failure
        """
        header("OpenClaw Backend Setup")

        with self.timer.step("prerequisites"):
            self.check_prerequisites()

        with self.timer.step("gateway token"):
            token, generated, values = self.provision_token()
            bind_ip, port = _gateway_address(values)

        with self.timer.step("runtime directory"):
            init = self.prepare_runtime_dir()

        with self.timer.step("start gateway"):
            self.start_gateway()

        doctor_ok = None
        if init.first_run:
            with self.timer.step("doctor"):
                doctor_ok = self.run_doctor()

        outcome = SetupOutcome(
            token=token,
            token_generated=generated,
            first_run=init.first_run,
            bind_ip=bind_ip,
            port=port,
            doctor_ok=doctor_ok,
        )
        print_summary(outcome, self.settings)
        self.timer.print_summary()
        return outcome


def print_summary(outcome: SetupOutcome, settings: SetupSettings) -> None:
    """Print gateway URLs and next steps."""
    base_url = f"http://{outcome.bind_ip}:{outcome.port}"
    container = settings.gateway_container
    service = settings.gateway_service

    header("Setup Complete")
    print(f"  Gateway:    {base_url}")
    print(f"  Control UI: {base_url}/#token={outcome.token}")
    print()
    print("  Next steps:")
    print()
    print("  1. Open the Control UI link above in your browser.")
    print("     (The token is in the URL, so the UI connects without pairing.)")
    print()
    print("  2. Link WhatsApp:")
    print(f"     docker exec -it {container} node openclaw.mjs channels login --channel whatsapp")
    print("     Then scan the QR code: WhatsApp > Settings > Linked Devices > Link a Device")
    print()
    print("  3. Verify everything:")
    print(f"     docker exec {container} node openclaw.mjs status")
    print(f"     docker exec {container} node openclaw.mjs channels status")
    print()
    print("  Useful commands:")
    print(f"     docker compose logs -f {service}     # Live logs")
    print(f"     docker compose restart {service}      # Restart")
    print("     docker compose down                          # Stop")
    print("     openclaw-setup reset                         # Wipe and start over")
    print()
