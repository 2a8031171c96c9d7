"""
Furnace Blower Override

The furnace board stops the blower shortly after the burner does, while
the heat exchanger still has useful heat in it. After heat stops this
forces the blower ON for a tail window, then puts back whatever mode the
thermostat had before the override started.
"""

import logging
import time
from typing import Optional

from .device_client import DeviceClient
from .exceptions import TransportError
from .fan import FanController
from .models import BlowerMode
from .settings import FanControlSettings
from .tracker import ThermostatStateTracker

logger = logging.getLogger(__name__)


class BlowerOverrideController(FanController):
    """Holds the blower ON after heat and restores the latched mode afterwards."""

    def __init__(self, client: DeviceClient, settings: FanControlSettings):
        """Initialize blower controller.

        Args:
            client: The thermostat's client; blower commands go to the same endpoint
            settings: Shared configuration (tail window)
        """
        super().__init__(client)
        self.settings = settings
        self.latched_mode: Optional[BlowerMode] = None

    def tick(self, tracker: ThermostatStateTracker) -> None:
        current_mode = tracker.blower_mode()

        in_tail = not tracker.is_heat_call_active() and (
            tracker.transitioned_this_poll()
            or tracker.time_since_transition() < self.settings.blower_tail_window
        )

        if in_tail:
            if self.latched_mode is None and current_mode is not None:
                self.latched_mode = current_mode
                logger.info(f"Latched blower state to: {current_mode.name}")
            if current_mode != BlowerMode.ON:
                self.set_blower_mode(BlowerMode.ON)
        elif self.latched_mode is not None:
            if current_mode == self.latched_mode:
                logger.info(f"Blower restored to {current_mode.name}")
                self.latched_mode = None
            else:
                # Keep asking until the thermostat reports the restored mode
                self.set_blower_mode(self.latched_mode)

    def set_blower_mode(self, mode: BlowerMode) -> bool:
        """Send a blower mode command.

        Returns:
            True if the thermostat accepted the command
        """
        start = time.monotonic()
        try:
            response = self.client.post({"fmode": int(mode)})
        except TransportError as e:
            logger.error(f"Setting blower {self.client.url} to: {int(mode)} failed: {e}")
            return False

        elapsed_ms = (time.monotonic() - start) * 1000
        if not response.ok:
            logger.error(
                f"Setting blower {self.client.url} to: {int(mode)}. "
                f"{response.status_code} : {response.text} ({elapsed_ms:.0f} ms)"
            )
            return False
        logger.info(
            f"Setting blower {self.client.url} to: {int(mode)}, "
            f"response {response.text} ({elapsed_ms:.0f} ms)"
        )
        return True

    def debug(self) -> str:
        return ThermostatStateTracker(self.client, self.settings).debug()
