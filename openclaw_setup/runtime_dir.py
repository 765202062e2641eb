"""Runtime data directory initialization.

The gateway persists WhatsApp credentials, paired devices, per-agent session
history and its workspace under data/openclaw. The tree is created once,
seeded from the versioned config template, and never touched again by setup.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from openclaw_logging import get_logger

from .config import Config, get_platform
from .errors import RuntimeDirError
from .output import warn


logger = get_logger("runtime_dir")


@dataclass
class InitResult:
    """Outcome of initialize_runtime_dir().

    Attributes:
        path: The runtime directory
        first_run: True if this call created it
        chowned: True if ownership was handed to the container uid
    """

    path: Path
    first_run: bool
    chowned: bool = False


def _chown_to_container_user(path: Path, uid: int) -> bool:
    """Best-effort ``sudo -n chown -R uid:uid path``.

    On macOS Docker Desktop maps uids itself, so this only runs on Linux.
    Failure is reported as a warning with the manual command.
    """
    if get_platform() != "linux":
        return False

    owner = f"{uid}:{uid}"
    cmd = ["sudo", "-n", "chown", "-R", owner, str(path)]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        ok = result.returncode == 0
    except FileNotFoundError:
        ok = False

    if not ok:
        warn(f"Could not chown {path} to uid {uid}. Run: sudo chown -R {owner} {path}")
    logger.debug("chown runtime dir", path=str(path), owner=owner, ok=ok)
    return ok


def initialize_runtime_dir(runtime_dir: Path, template: Path, uid: int = Config.RUNTIME_UID) -> InitResult:
    """Create and seed the runtime directory if it does not exist.

    An existing directory is left exactly as it is.

    Args:
        runtime_dir: Target directory (e.g. <project>/data/openclaw)
        template: Config template copied to openclaw.json
        uid: Owner uid for the container user

    Returns:
        InitResult describing what happened

    Raises:
        RuntimeDirError: If the path is not a directory, the template is
            missing or the tree cannot be created
    """
    if runtime_dir.is_dir():
        logger.debug("Runtime dir exists, preserving", path=str(runtime_dir))
        return InitResult(path=runtime_dir, first_run=False)

    if runtime_dir.exists():
        raise RuntimeDirError(
            f"{runtime_dir} exists but is not a directory",
            hint=f"Move it out of the way and re-run: mv {runtime_dir} {runtime_dir}.bak",
        )

    if not template.is_file():
        raise RuntimeDirError(
            f"Config template not found: {template}",
            hint=f"Restore {template.name} from version control and re-run.",
        )

    # Modes are set while the caller still owns the tree; after the chown a
    # non-root caller can no longer change them.
    try:
        for subdir in Config.RUNTIME_SUBDIRS:
            (runtime_dir / subdir).mkdir(parents=True, exist_ok=True)

        config_file = runtime_dir / Config.RUNTIME_CONFIG_NAME
        shutil.copyfile(template, config_file)
        os.chmod(runtime_dir, Config.RUNTIME_DIR_MODE)
        os.chmod(config_file, Config.RUNTIME_CONFIG_MODE)
    except OSError as e:
        shutil.rmtree(runtime_dir, ignore_errors=True)
        raise RuntimeDirError(f"Could not create {runtime_dir}: {e}")

    chowned = _chown_to_container_user(runtime_dir, uid)

    logger.info("Runtime dir created", path=str(runtime_dir), chowned=chowned)
    return InitResult(path=runtime_dir, first_run=True, chowned=chowned)
