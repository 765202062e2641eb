"""Per-step timing for openclaw-setup.

Enabled with ``timing: true`` in openclaw-setup.yaml or OPENCLAW_SETUP_TIMING=1.
"""

import time
from contextlib import contextmanager


class StepTimer:
    """Collects wall-clock timings for setup steps."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.timings: list[tuple[str, float]] = []
        self.start_time: float = time.perf_counter()

    @contextmanager
    def step(self, name: str):
        """Time the enclosed block as one step."""
        if not self.enabled:
            yield
            return
        started = time.perf_counter()
        try:
            yield
        finally:
            self.timings.append((name, (time.perf_counter() - started) * 1000))

    def print_summary(self) -> None:
        if not self.enabled or not self.timings:
            return

        total_time = (time.perf_counter() - self.start_time) * 1000

        print("\n" + "=" * 60)
        print("SETUP TIMING SUMMARY")
        print("=" * 60)
        print(f"{'Step':<35} {'Time (ms)':>10} {'%':>6}")
        print("-" * 60)

        for name, elapsed in self.timings:
            pct = (elapsed / total_time) * 100 if total_time > 0 else 0
            bar = "█" * int(pct / 5)
            print(f"{name:<35} {elapsed:>10.1f} {pct:>5.1f}% {bar}")

        print("-" * 60)
        print(f"{'TOTAL':<35} {total_time:>10.1f}")
        print("=" * 60 + "\n")
