"""Gateway readiness checks.

The gateway prints a fixed marker once its WebSocket listener is up. By
default readiness is detected by scanning ``docker logs`` for that marker;
when a health URL is configured, an HTTP probe is used instead.
"""

import time
from collections.abc import Callable

import requests

from openclaw_logging import get_logger

from .compose import ComposeClient
from .errors import ReadinessTimeout


logger = get_logger("readiness")


class LogMarkerProbe:
    """Ready when the container's log output contains the marker."""

    def __init__(self, client: ComposeClient, container: str, marker: str):
        self.client = client
        self.container = container
        self.marker = marker

    @property
    def description(self) -> str:
        return f"'{self.marker}' in docker logs {self.container}"

    def __call__(self) -> bool:
        return self.marker in self.client.logs(self.container)


class HttpHealthProbe:
    """Ready when the health endpoint answers with a 2xx status."""

    def __init__(self, url: str, timeout: float = 2.0, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def description(self) -> str:
        return f"HTTP 2xx from {self.url}"

    def __call__(self) -> bool:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.debug("Health probe not ready", url=self.url, reason=type(e).__name__)
            return False
        return 200 <= response.status_code < 300


def wait_until_ready(
    probe: Callable[[], bool],
    attempts: int,
    interval: float,
    *,
    container: str = "openclaw-gateway",
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Poll probe until it reports ready.

    The probe is checked at most ``attempts`` times with ``interval`` seconds
    between checks and no sleep after the final one. Checks also stop once
    ``attempts * interval`` seconds of wall-clock time have passed, so a slow
    probe cannot stretch the wait beyond that plus one probe call.

    Args:
        probe: Zero-argument callable returning True once ready
        attempts: Maximum number of checks (at least 1)
        interval: Seconds between checks
        container: Container named in the failure hint
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock (injectable for tests)

    Returns:
        The attempt number (1-based) on which the gateway became ready

    Raises:
        ReadinessTimeout: If the probe never reports ready
    """
    attempts = max(attempts, 1)
    description = getattr(probe, "description", "readiness probe")
    deadline = clock() + attempts * interval

    for attempt in range(1, attempts + 1):
        if probe():
            logger.debug("Gateway ready", attempt=attempt, probe=description)
            return attempt
        logger.debug("Gateway not ready yet", attempt=attempt, attempts=attempts)
        if attempt == attempts:
            break

        remaining = deadline - clock()
        if interval > 0 and remaining <= 0:
            logger.debug("Readiness deadline passed", attempt=attempt)
            break
        sleep(min(interval, max(remaining, 0.0)))

    raise ReadinessTimeout(
        f"Gateway did not start in time ({attempts} checks, {interval:g}s apart).",
        hint=f"Check: docker logs {container}",
    )
