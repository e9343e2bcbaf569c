"""
Drift-compensated periodic loop for netrate

After every step the loop measures the gap since the previous step finished.
A gap shorter than half the interval (the first tick) is followed by a plain
interval sleep; otherwise the loop sleeps 2T minus the gap, so a late tick is
paid back by an early one. Two consecutive gaps always add up to 2T plus the
step time, which keeps the long-run tick spacing at the configured interval
instead of letting the step time accumulate.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Scheduler:
    """Run a step forever at a fixed cadence"""

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.clock = clock
        self.sleep = sleep

    def sleep_for(self, elapsed: float) -> float:
        """Sleep duration after a tick whose gap since the last one was elapsed"""
        if elapsed < self.interval / 2:
            return self.interval
        return max(0.0, 2 * self.interval - elapsed)

    def run(self, step: Callable[[], None], max_ticks: Optional[int] = None) -> int:
        """
        Call step every interval seconds until it raises

        Exceptions from step propagate unchanged. max_ticks bounds the number
        of steps (None runs forever); the number of steps run is returned.
        """
        previous = self.clock()
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            step()
            ticks += 1

            now = self.clock()
            elapsed = now - previous
            previous = now

            duration = self.sleep_for(elapsed)
            logger.debug(f"Tick {ticks}: elapsed={elapsed:.4f}s, sleeping {duration:.4f}s")
            self.sleep(duration)
        return ticks
