"""
Tests for openclaw_setup.runtime_dir module.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from conftest import TEMPLATE_JSON
from openclaw_setup.errors import RuntimeDirError
from openclaw_setup.runtime_dir import _chown_to_container_user, initialize_runtime_dir


@pytest.fixture
def macos(monkeypatch):
    monkeypatch.setattr("openclaw_setup.runtime_dir.get_platform", lambda: "macos")


class TestInitializeRuntimeDir:
    """Tests for initialize_runtime_dir function."""

    def test_first_run_creates_layout(self, project_dir, macos):
        """Test subdirectories and config file are created."""
        runtime = project_dir / "data" / "openclaw"

        result = initialize_runtime_dir(runtime, project_dir / "openclaw.template.json")

        assert result.first_run
        assert result.path == runtime
        for sub in ("workspace", "agents/main/sessions", "credentials", "devices"):
            assert (runtime / sub).is_dir()
        assert (runtime / "openclaw.json").read_text() == TEMPLATE_JSON

    def test_first_run_sets_modes(self, project_dir, macos):
        """Test the directory is 0700 and the config 0600."""
        runtime = project_dir / "data" / "openclaw"

        initialize_runtime_dir(runtime, project_dir / "openclaw.template.json")

        assert runtime.stat().st_mode & 0o777 == 0o700
        assert (runtime / "openclaw.json").stat().st_mode & 0o777 == 0o600

    def test_existing_dir_is_untouched(self, project_dir, macos, snapshot_tree):
        """Test an existing runtime dir is preserved byte for byte."""
        runtime = project_dir / "data" / "openclaw"
        (runtime / "credentials").mkdir(parents=True)
        (runtime / "openclaw.json").write_text('{"edited": true}\n')
        (runtime / "credentials" / "creds.json").write_text("{}")
        before = snapshot_tree(runtime)

        result = initialize_runtime_dir(runtime, project_dir / "openclaw.template.json")

        assert not result.first_run
        assert snapshot_tree(runtime) == before
        assert not (runtime / "workspace").exists()

    def test_existing_dir_without_template_is_fine(self, tmp_path, macos):
        """Test the template is only needed on first run."""
        runtime = tmp_path / "data" / "openclaw"
        runtime.mkdir(parents=True)

        result = initialize_runtime_dir(runtime, tmp_path / "missing.json")

        assert not result.first_run

    def test_missing_template_raises_before_creating(self, tmp_path, macos):
        """Test nothing is created when the template is missing."""
        runtime = tmp_path / "data" / "openclaw"

        with pytest.raises(RuntimeDirError) as exc_info:
            initialize_runtime_dir(runtime, tmp_path / "openclaw.template.json")

        assert "openclaw.template.json" in str(exc_info.value)
        assert not runtime.exists()

    def test_linux_chowns_tree(self, project_dir, monkeypatch):
        """Test ownership is handed to the container uid on Linux."""
        monkeypatch.setattr("openclaw_setup.runtime_dir.get_platform", lambda: "linux")
        runtime = project_dir / "data" / "openclaw"

        with patch("openclaw_setup.runtime_dir.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            result = initialize_runtime_dir(runtime, project_dir / "openclaw.template.json", uid=1000)

        assert result.chowned
        cmd = mock_run.call_args[0][0]
        assert cmd == ["sudo", "-n", "chown", "-R", "1000:1000", str(runtime)]

    def test_modes_set_before_chown(self, project_dir, monkeypatch):
        """Test owner-only modes are in place before ownership changes hands."""
        monkeypatch.setattr("openclaw_setup.runtime_dir.get_platform", lambda: "linux")
        runtime = project_dir / "data" / "openclaw"
        modes_at_chown = {}

        def chown(cmd, **kwargs):
            modes_at_chown["dir"] = runtime.stat().st_mode & 0o777
            modes_at_chown["config"] = (runtime / "openclaw.json").stat().st_mode & 0o777
            # From here on the caller no longer owns the tree
            monkeypatch.setattr(
                "openclaw_setup.runtime_dir.os.chmod",
                MagicMock(side_effect=PermissionError("Operation not permitted")),
            )
            return subprocess.CompletedProcess(cmd, 0, "", "")

        with patch("openclaw_setup.runtime_dir.subprocess.run", side_effect=chown):
            result = initialize_runtime_dir(runtime, project_dir / "openclaw.template.json", uid=1000)

        assert result.chowned
        assert modes_at_chown == {"dir": 0o700, "config": 0o600}
        assert runtime.stat().st_mode & 0o777 == 0o700
        assert (runtime / "openclaw.json").stat().st_mode & 0o777 == 0o600

    def test_file_in_place_of_dir_raises(self, project_dir, macos):
        """Test a regular file at the runtime path is not mistaken for data."""
        runtime = project_dir / "data" / "openclaw"
        runtime.parent.mkdir()
        runtime.write_text("not a directory")

        with pytest.raises(RuntimeDirError) as exc_info:
            initialize_runtime_dir(runtime, project_dir / "openclaw.template.json")

        assert "not a directory" in str(exc_info.value)
        assert runtime.read_text() == "not a directory"


class TestChownToContainerUser:
    """Tests for _chown_to_container_user function."""

    def test_skipped_on_macos(self, tmp_path, macos):
        """Test no command runs outside Linux."""
        with patch("openclaw_setup.runtime_dir.subprocess.run") as mock_run:
            assert _chown_to_container_user(tmp_path, 1000) is False
        mock_run.assert_not_called()

    def test_failure_warns(self, tmp_path, monkeypatch, capsys):
        """Test a failed sudo prints the manual command."""
        monkeypatch.setattr("openclaw_setup.runtime_dir.get_platform", lambda: "linux")
        with patch("openclaw_setup.runtime_dir.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess([], 1, "", "sudo: a password is required")
            assert _chown_to_container_user(tmp_path, 1000) is False

        out = capsys.readouterr().out
        assert "[WARN]" in out
        assert f"sudo chown -R 1000:1000 {tmp_path}" in out

    def test_missing_sudo_warns(self, tmp_path, monkeypatch, capsys):
        """Test a host without sudo is handled like a failed chown."""
        monkeypatch.setattr("openclaw_setup.runtime_dir.get_platform", lambda: "linux")
        with patch("openclaw_setup.runtime_dir.subprocess.run", side_effect=FileNotFoundError):
            assert _chown_to_container_user(tmp_path, 1000) is False

        assert "[WARN]" in capsys.readouterr().out
