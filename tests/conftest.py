"""
Pytest configuration and shared fixtures for openclaw-setup tests.
"""

import subprocess
from pathlib import Path

import pytest

from openclaw_logging import reset_logging
from openclaw_setup.settings import SetupSettings


VALID_API_KEY = "sk-proj-abcdefghijklmnopqrstuvwxyz0123456789"

TEMPLATE_JSON = '{\n  "gateway": {"mode": "local"}\n}\n'


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host settings out of the tests."""
    for name in (
        "OPENAI_API_KEY",
        "OPENCLAW_GATEWAY_TOKEN",
        "OPENCLAW_BIND_IP",
        "OPENCLAW_GATEWAY_PORT",
        "OPENCLAW_BRIDGE_PORT",
        "OPENCLAW_PROJECT_DIR",
        "OPENCLAW_READY_ATTEMPTS",
        "OPENCLAW_READY_INTERVAL",
        "OPENCLAW_HEALTH_URL",
        "OPENCLAW_SETUP_LOG_LEVEL",
        "OPENCLAW_SETUP_LOG_FILE",
        "OPENCLAW_SETUP_TIMING",
        "NO_COLOR",
    ):
        # setenv first so teardown also removes values the code under test sets
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield
    reset_logging()


@pytest.fixture
def project_dir(tmp_path):
    """A project directory with a valid .env and the config template."""
    (tmp_path / ".env").write_text(f"# secrets\nOPENAI_API_KEY={VALID_API_KEY}\n")
    (tmp_path / "openclaw.template.json").write_text(TEMPLATE_JSON)
    (tmp_path / ".env.example").write_text("OPENAI_API_KEY=sk-proj-your-openai-key-here\n")
    return tmp_path


@pytest.fixture
def settings(project_dir):
    """Settings for project_dir with a fast readiness loop."""
    return SetupSettings(
        project_dir=project_dir,
        ready_attempts=3,
        ready_interval=0.0,
        settle_seconds=0.0,
    )


class FakeDocker:
    """Stand-in for subprocess.run that answers docker commands.

    Attributes:
        calls: Every command line received, in order
        logs: Output returned by ``docker logs``
        failures: Map of command prefix (tuple) to return code
    """

    def __init__(self, logs: str = "gateway listening on ws://0.0.0.0:18789\n"):
        self.calls: list[list[str]] = []
        self.kwargs: list[dict] = []
        self.logs = logs
        self.failures: dict[tuple[str, ...], int] = {}
        self.doctor_output = "doctor: config ok\n"

    def fail(self, *prefix: str, returncode: int = 1) -> None:
        self.failures[prefix] = returncode

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        self.kwargs.append(kwargs)

        for prefix, code in self.failures.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                return subprocess.CompletedProcess(cmd, code, "", "boom\n")

        if cmd[:2] == ["docker", "logs"]:
            return subprocess.CompletedProcess(cmd, 0, self.logs, "")
        if cmd[:4] == ["docker", "compose", "run", "--rm"]:
            return subprocess.CompletedProcess(cmd, 0, self.doctor_output, "")
        if cmd[:3] == ["docker", "compose", "version"]:
            return subprocess.CompletedProcess(cmd, 0, "Docker Compose version v2.29.1\n", "")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def commands(self, *prefix: str) -> list[list[str]]:
        """Calls starting with prefix."""
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]

    def compose_verbs(self) -> list[str]:
        """Second compose argument of each compose call (pull, up, ...)."""
        return [c[2] for c in self.calls if c[:2] == ["docker", "compose"]]


@pytest.fixture
def fake_docker(monkeypatch):
    """Route subprocess.run through FakeDocker and pretend docker is installed."""
    fake = FakeDocker()
    monkeypatch.setattr(subprocess, "run", fake)
    monkeypatch.setattr("openclaw_setup.prerequisites.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("openclaw_setup.runtime_dir.get_platform", lambda: "macos")
    return fake


@pytest.fixture
def snapshot_tree():
    """Return a function mapping relative path -> (mode, content) under a root."""

    def _snapshot(root: Path) -> dict[str, tuple[int, bytes | None]]:
        result = {}
        for path in sorted(root.rglob("*")):
            mode = path.stat().st_mode
            content = path.read_bytes() if path.is_file() else None
            result[str(path.relative_to(root))] = (mode, content)
        result["."] = (root.stat().st_mode, None)
        return result

    return _snapshot
