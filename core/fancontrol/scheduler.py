"""
Control Loop

One fixed-cadence, single-threaded loop: poll the thermostat, then let
every fan react to the new reading, then sleep out the rest of the period.
Device calls are made one after another; a slow fan delays its siblings
but cannot corrupt them.
"""

import logging
import sys
import time
from typing import Callable, Sequence, TextIO

from .fan import FanController
from .tracker import ThermostatStateTracker

logger = logging.getLogger(__name__)


def sleep_duration(period: float, elapsed: float) -> float:
    """Time left in the period, never negative. Missed cycles are not caught up."""
    return max(0.0, period - elapsed)


class ControlLoopScheduler:
    """Drives the tracker and fan controllers at the configured poll period."""

    def __init__(
        self,
        tracker: ThermostatStateTracker,
        controllers: Sequence[FanController],
        poll_period: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.tracker = tracker
        self.controllers = list(controllers)
        self.poll_period = poll_period
        self.clock = clock
        self.sleep = sleep

    def run_once(self) -> float:
        """Run one iteration.

        Returns:
            Seconds to sleep before the next iteration
        """
        start = self.clock()

        # A failed poll freezes every controller until the next good read
        if self.tracker.poll():
            for controller in self.controllers:
                controller.tick(self.tracker)
            logger.info(str(self.tracker))

        return sleep_duration(self.poll_period, self.clock() - start)

    def run_forever(self):
        """Run until the process is killed."""
        logger.info(
            f"Fan control loop starting: {len(self.controllers)} fan(s), "
            f"poll period {self.poll_period}s"
        )
        while True:
            self.sleep(self.run_once())

    def run_diagnostics(self, out: TextIO = sys.stdout):
        """Query every device once and write the raw responses."""
        for controller in self.controllers:
            out.write(controller.debug())
            out.write("\n")
