"""Reset: stop the gateway and delete all runtime data.

Destructive and irreversible. Requires the operator to type the exact
confirmation word; anything else aborts cleanly.
"""

import shutil
from collections.abc import Callable

from openclaw_logging import get_logger

from .compose import ComposeClient
from .config import Config
from .output import info, success, warn
from .settings import SetupSettings


logger = get_logger("reset")


def confirm(prompt: str, input_fn: Callable[[str], str] | None = None) -> bool:
    """Return True only if the operator typed the confirmation word.

    EOF (e.g. stdin closed) counts as a refusal.
    """
    input_fn = input_fn or input
    try:
        response = input_fn(prompt)
    except EOFError:
        return False
    return response.strip() == Config.RESET_CONFIRMATION


def reset_runtime(
    settings: SetupSettings,
    client: ComposeClient | None = None,
    input_fn: Callable[[str], str] | None = None,
) -> bool:
    """Stop the gateway and delete the runtime directory after confirmation.

    Args:
        settings: Resolved settings (runtime dir, project dir)
        client: Compose client (default: one for settings.project_dir)
        input_fn: Prompt function (injectable for tests)

    Returns:
        True if data was wiped, False if the operator aborted
    """
    warn("This will delete ALL runtime data (WhatsApp link, sessions, devices).")
    if not confirm(f"Type '{Config.RESET_CONFIRMATION}' to confirm: ", input_fn):
        info("Aborted.")
        return False

    client = client or ComposeClient(settings.project_dir)
    result = client.down()
    if not result.success:
        # Already stopped, or docker is gone; neither blocks the wipe
        logger.debug("compose down failed, continuing", returncode=result.returncode)

    runtime_dir = settings.runtime_dir
    if runtime_dir.exists():
        shutil.rmtree(runtime_dir)
        logger.info("Runtime dir removed", path=str(runtime_dir))

    success("Runtime data wiped. Run openclaw-setup again to start fresh.")
    return True
