"""
Tests for openclaw_setup.readiness module.
"""

from unittest.mock import MagicMock

import pytest
import requests

from openclaw_setup.compose import ComposeClient
from openclaw_setup.errors import ReadinessTimeout
from openclaw_setup.readiness import HttpHealthProbe, LogMarkerProbe, wait_until_ready


class CountingProbe:
    """Probe that becomes ready on a given check (None = never)."""

    def __init__(self, ready_on=None):
        self.ready_on = ready_on
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.ready_on is not None and self.calls >= self.ready_on


class TestWaitUntilReady:
    """Tests for wait_until_ready function."""

    def test_ready_immediately(self):
        """Test no sleep happens when the first check succeeds."""
        probe = CountingProbe(ready_on=1)
        sleeps = []

        assert wait_until_ready(probe, 15, 2.0, sleep=sleeps.append) == 1
        assert sleeps == []

    def test_ready_on_later_attempt(self):
        """Test the attempt number is returned."""
        probe = CountingProbe(ready_on=4)
        sleeps = []

        assert wait_until_ready(probe, 15, 2.0, sleep=sleeps.append) == 4
        assert sleeps == [2.0, 2.0, 2.0]

    def test_never_ready_is_bounded(self):
        """Test at most N checks and N-1 sleeps before failing."""
        probe = CountingProbe()
        sleeps = []

        with pytest.raises(ReadinessTimeout):
            wait_until_ready(probe, 15, 2.0, sleep=sleeps.append)

        assert probe.calls == 15
        assert len(sleeps) == 14
        assert sum(sleeps) == 28.0

    def test_ready_on_last_attempt(self):
        """Test success on the final check is still success."""
        probe = CountingProbe(ready_on=3)
        assert wait_until_ready(probe, 3, 0, sleep=lambda s: None) == 3

    def test_timeout_hint_names_container(self):
        """Test the failure points at the container logs."""
        with pytest.raises(ReadinessTimeout) as exc_info:
            wait_until_ready(CountingProbe(), 2, 0, container="gw", sleep=lambda s: None)

        assert exc_info.value.hint == "Check: docker logs gw"

    def test_slow_check_stops_at_deadline(self):
        """Test checks that take 5s each cannot stretch the wait past the budget."""
        now = [0.0]

        class SlowCheck(CountingProbe):
            def __call__(self):
                now[0] += 5.0
                return super().__call__()

        def fake_sleep(seconds):
            now[0] += seconds

        check = SlowCheck()
        with pytest.raises(ReadinessTimeout):
            wait_until_ready(check, 15, 2.0, sleep=fake_sleep, clock=lambda: now[0])

        assert check.calls < 15
        # Budget of 15 * 2s, plus at most one check started before it ran out
        assert now[0] <= 30.0 + 5.0

    def test_last_sleep_trimmed_to_deadline(self):
        """Test the final sleep does not overshoot the deadline."""
        now = [0.0]
        sleeps = []

        def check():
            now[0] += 1.5
            return False

        def fake_sleep(seconds):
            sleeps.append(seconds)
            now[0] += seconds

        with pytest.raises(ReadinessTimeout):
            wait_until_ready(check, 3, 2.0, sleep=fake_sleep, clock=lambda: now[0])

        # 1.5 check + 2.0 sleep + 1.5 check leaves 1.0 of the 6.0 budget
        assert sleeps == [2.0, 1.0]

    def test_attempts_floor_is_one(self):
        """Test a zero attempt count still checks once."""
        probe = CountingProbe()
        with pytest.raises(ReadinessTimeout):
            wait_until_ready(probe, 0, 1.0, sleep=lambda s: None)
        assert probe.calls == 1


class TestLogMarkerProbe:
    """Tests for LogMarkerProbe."""

    def test_ready_when_marker_present(self):
        """Test the marker anywhere in the logs counts."""
        client = MagicMock(spec=ComposeClient)
        client.logs.return_value = "booting\n[gateway] listening on ws://0.0.0.0:18789\n"
        probe = LogMarkerProbe(client, "openclaw-gateway", "listening on ws://")

        assert probe() is True
        client.logs.assert_called_once_with("openclaw-gateway")

    def test_not_ready_without_marker(self):
        """Test logs without the marker are not ready."""
        client = MagicMock(spec=ComposeClient)
        client.logs.return_value = "booting\n"
        probe = LogMarkerProbe(client, "openclaw-gateway", "listening on ws://")

        assert probe() is False

    def test_with_fake_docker(self, tmp_path, fake_docker):
        """Test the probe reads docker logs for the container."""
        probe = LogMarkerProbe(ComposeClient(tmp_path), "openclaw-gateway", "listening on ws://")

        assert probe() is True
        assert fake_docker.calls == [["docker", "logs", "openclaw-gateway"]]


class TestHttpHealthProbe:
    """Tests for HttpHealthProbe."""

    def test_ready_on_2xx(self):
        """Test a 200 response is ready."""
        session = MagicMock()
        session.get.return_value = MagicMock(status_code=200)
        probe = HttpHealthProbe("http://127.0.0.1:18789/health", session=session)

        assert probe() is True
        session.get.assert_called_once_with("http://127.0.0.1:18789/health", timeout=2.0)

    def test_not_ready_on_error_status(self):
        """Test a 503 is not ready."""
        session = MagicMock()
        session.get.return_value = MagicMock(status_code=503)
        probe = HttpHealthProbe("http://127.0.0.1:18789/health", session=session)

        assert probe() is False

    def test_connection_error_is_not_ready(self):
        """Test a refused connection is not ready rather than an error."""
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        probe = HttpHealthProbe("http://127.0.0.1:18789/health", session=session)

        assert probe() is False

    def test_polled_by_wait_until_ready(self):
        """Test the HTTP probe plugs into the readiness loop."""
        session = MagicMock()
        session.get.side_effect = [
            requests.exceptions.ConnectionError("refused"),
            MagicMock(status_code=200),
        ]
        probe = HttpHealthProbe("http://127.0.0.1:18789/health", session=session)

        assert wait_until_ready(probe, 5, 0, sleep=lambda s: None) == 2
