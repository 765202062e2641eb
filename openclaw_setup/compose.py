"""Docker Compose v2 client for openclaw-setup.

Every interaction with the container runtime goes through ComposeClient:
version check, pull, up, restart, down, the one-shot CLI run used for the
doctor subcommand, and reading the gateway's log stream.
"""

import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from openclaw_logging import get_logger

from .config import Config
from .errors import ComposeError


logger = get_logger("compose")


@dataclass
class CommandResult:
    """Result of a docker invocation.

    Attributes:
        args: Full command line
        returncode: Exit code (127 if the binary could not be started)
        stdout: Captured stdout
        stderr: Captured stderr
    """

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout followed by stderr, like ``2>&1``."""
        return self.stdout + self.stderr

    def tail(self, lines: int) -> list[str]:
        return self.output.rstrip("\n").splitlines()[-lines:] if self.output.strip() else []


class ComposeClient:
    """Thin wrapper over ``docker compose`` run from the project directory."""

    def __init__(
        self,
        project_dir: Path,
        docker: str = "docker",
        timeout: float | None = None,
        logs_timeout: float = Config.LOGS_TIMEOUT,
    ):
        """
        Args:
            project_dir: Directory holding docker-compose.yml and .env
            docker: Docker CLI executable
            timeout: Optional per-command timeout in seconds
            logs_timeout: Timeout for docker logs, which is polled repeatedly
        """
        self.project_dir = Path(project_dir)
        self.docker = docker
        self.timeout = timeout
        self.logs_timeout = logs_timeout

    def _run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        cmd = [self.docker, *args]
        timeout = timeout if timeout is not None else self.timeout
        logger.debug("Running command", command=" ".join(cmd), cwd=str(self.project_dir))
        start = time.perf_counter()
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.project_dir,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.debug("Executable not found", command=cmd[0])
            return CommandResult(cmd, 127, "", f"{cmd[0]}: command not found\n")
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out", command=" ".join(cmd), timeout=timeout)
            return CommandResult(cmd, 124, "", f"timed out after {timeout}s\n")

        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "Command finished",
            command=" ".join(cmd),
            returncode=proc.returncode,
            duration_ms=round(duration_ms, 1),
        )
        return CommandResult(cmd, proc.returncode, proc.stdout or "", proc.stderr or "")

    def _compose(self, *args: str) -> CommandResult:
        return self._run(["compose", *args])

    def _require(self, result: CommandResult, what: str) -> CommandResult:
        if not result.success:
            detail = "\n".join(result.tail(5))
            raise ComposeError(
                f"{what} failed (exit {result.returncode})" + (f":\n{detail}" if detail else ""),
                hint=f"Re-run manually: {' '.join(result.args)}",
            )
        return result

    def version(self) -> CommandResult:
        """``docker compose version``; success means the v2 plugin is present."""
        return self._compose("version")

    def pull(self, service: str) -> CommandResult:
        return self._require(self._compose("pull", service), f"Pulling image for {service}")

    def up(self, service: str) -> CommandResult:
        return self._require(self._compose("up", "-d", service), f"Starting {service}")

    def restart(self, service: str) -> CommandResult:
        return self._require(self._compose("restart", service), f"Restarting {service}")

    def down(self) -> CommandResult:
        """Stop and remove the project's containers. Callers decide if failure matters."""
        return self._compose("down")

    def run_once(self, service: str, args: Sequence[str]) -> CommandResult:
        """``docker compose run --rm <service> <args>``; the caller inspects the result."""
        return self._compose("run", "--rm", service, *args)

    def logs(self, container: str) -> str:
        """Combined stdout/stderr of ``docker logs <container>``.

        A read that exceeds logs_timeout is abandoned and yields only the
        timeout notice.
        """
        result = self._run(["logs", container], timeout=self.logs_timeout)
        return result.output
