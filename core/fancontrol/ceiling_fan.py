"""
Ceiling Fan Control

Turns the ceiling fans up while the furnace is heating so warm air from
the ceiling gets pushed down, and back down once it stops. Changes are
debounced: heat must have been steady for a settle delay before the new
speed is applied, and each stable interval gets at most one change.
"""

import logging
import time
from typing import Optional

from .device_client import DeviceClient
from .exceptions import CommandFailure, ParseError, TransportError, TransportTimeout
from .fan import FanController
from .settings import FanControlSettings
from .tracker import ThermostatStateTracker

logger = logging.getLogger(__name__)

QUERY_PAYLOAD = {"queryDynamicShadowData": 1}
REBOOT_PAYLOAD = {"reboot": 1}


class CeilingFan:
    """Commands understood by one ceiling fan."""

    def __init__(self, client: DeviceClient):
        self.client = client

    @property
    def url(self) -> str:
        return self.client.url

    def set_speed(self, speed: int) -> None:
        """Set the fan speed.

        Raises:
            TransportError: If the fan cannot be reached
            CommandFailure: If the fan rejects the command
        """
        start = time.monotonic()
        response = self.client.post({"fanSpeed": speed})
        elapsed_ms = (time.monotonic() - start) * 1000

        if not response.ok:
            logger.error(
                f"Setting fan {self.url} speed to: {speed}. "
                f"{response.status_code} : {response.text} ({elapsed_ms:.0f} ms)"
            )
            raise CommandFailure(
                f"Fan {self.url} rejected speed {speed}",
                status_code=response.status_code,
                body=response.text,
                url=self.url,
            )
        logger.info(f"Setting fan {self.url} speed to: {speed}. {response.status_code} ({elapsed_ms:.0f} ms)")

    def query_speed(self) -> Optional[int]:
        """Current fan speed, or None if the fan could not be queried."""
        try:
            response = self.client.post(QUERY_PAYLOAD)
            if not response.ok:
                return None
            data = response.json()
        except (TransportError, ParseError) as e:
            logger.warning(f"Failed to query fan {self.url}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        speed = data.get("fanSpeed")
        if isinstance(speed, bool) or not isinstance(speed, int):
            return None
        return speed

    def reboot(self) -> None:
        """Restart the fan's controller.

        The fan drops the connection instead of answering, so a timeout is
        the expected outcome and is not an error.
        """
        try:
            response = self.client.post(REBOOT_PAYLOAD)
        except TransportTimeout:
            logger.info(f"Rebooting fan {self.url}")
            return
        except TransportError as e:
            logger.error(f"Failed to reboot fan {self.url}: {e}")
            return
        logger.info(f"Rebooting fan {self.url} returned {response.status_code}")

    def debug(self) -> str:
        try:
            response = self.client.post(QUERY_PAYLOAD)
        except TransportError as e:
            return f"Fan query response for: {self.url} {e}\n"
        return f"Fan query response for: {self.url} {response.status_code}\n{response.text}\n"


class CeilingFanSynchronizer(FanController):
    """Debounced speed changes for one ceiling fan."""

    def __init__(self, fan: CeilingFan, settings: FanControlSettings):
        super().__init__(fan.client)
        self.fan = fan
        self.settings = settings
        self.applied_since_transition = False

    def tick(self, tracker: ThermostatStateTracker) -> None:
        if tracker.transitioned_this_poll():
            # New heat state: start a fresh settle window
            self.applied_since_transition = False
            return

        if self.applied_since_transition:
            return

        heat_on = tracker.is_heat_call_active()
        delay = self.settings.ceiling_fan_on_delay if heat_on else self.settings.ceiling_fan_off_delay
        if tracker.time_since_transition() <= delay:
            return

        speed = self.settings.heat_on_fan_speed if heat_on else self.settings.heat_off_fan_speed
        try:
            self.fan.set_speed(speed)
        except TransportError as e:
            logger.error(f"Setting fan {self.fan.url} speed to: {speed} failed: {e}")
            return
        except CommandFailure:
            # Already logged; retried next cycle
            return
        self.applied_since_transition = True

    def debug(self) -> str:
        return self.fan.debug()
