"""
Thermostat State Tracking

Polls the thermostat and keeps the heat-call history the fan controllers
depend on: the latest reading, whether this poll saw heat switch on or
off, when that last happened, and how many polls in a row have failed.
"""

import logging
import time
from typing import Callable, Optional

from .device_client import DeviceClient
from .exceptions import HttpStatusError, ParseError, TransportError
from .models import BlowerMode, ThermostatReading
from .settings import FanControlSettings

logger = logging.getLogger(__name__)


class ThermostatStateTracker:
    """Heat-call history built from a stream of thermostat polls."""

    def __init__(
        self,
        client: DeviceClient,
        settings: FanControlSettings,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.settings = settings
        self.clock = clock

        self.current_reading: Optional[ThermostatReading] = None
        self.last_transition_at: Optional[float] = None
        self.consecutive_failures = 0
        self._transitioned_this_poll = False

    def poll(self) -> bool:
        """Fetch and decode a new reading.

        Returns:
            True iff the thermostat answered with a decodable status. On
            failure the previous reading is kept.
        """
        self._transitioned_this_poll = False

        status_code = None
        body = ""
        try:
            response = self.client.get()
            status_code = response.status_code
            body = response.text
            if not response.ok:
                raise HttpStatusError(
                    f"Thermostat returned error code: {status_code}",
                    status_code=status_code,
                    body=body,
                    url=self.client.url,
                )
            reading = ThermostatReading.from_json(response.json(), body=body)
        except (TransportError, HttpStatusError, ParseError) as e:
            self._record_failure(e, status_code, body)
            return False

        self.consecutive_failures = 0
        previous = self.current_reading
        self._transitioned_this_poll = (
            previous is not None and reading.heat_call_active != previous.heat_call_active
        )
        if self._transitioned_this_poll:
            self.last_transition_at = self.clock()
            logger.info(f"Heat call {'started' if reading.heat_call_active else 'stopped'}")
        self.current_reading = reading
        return True

    def _record_failure(self, error: Exception, status_code: Optional[int], body: str):
        self.consecutive_failures += 1
        logger.info(f"Thermostat poll failed: {error}")

        if self.consecutive_failures % self.settings.failure_report_interval == 0:
            action = "parse data" if isinstance(error, ParseError) else "get data"
            logger.error(
                f"Thermostat {self.client.url} failed to {action} "
                f"{self.consecutive_failures} attempts. "
                f"Returned code: {status_code}, response: {body}"
            )

    def is_heat_call_active(self) -> bool:
        return self.current_reading is not None and self.current_reading.heat_call_active

    def blower_mode(self) -> Optional[BlowerMode]:
        """Last reported blower mode, or None before the first successful poll."""
        if self.current_reading is None:
            return None
        return self.current_reading.blower_mode

    def transitioned_this_poll(self) -> bool:
        """True iff the latest successful poll saw the heat call change."""
        return self._transitioned_this_poll

    def time_since_transition(self) -> float:
        """Seconds since heat last switched on or off.

        Before any transition has been observed this reports the blower
        tail window, so the blower override stays idle at start-up and the
        ceiling fans may settle straight away.
        """
        if self.last_transition_at is None:
            return self.settings.blower_tail_window
        return self.clock() - self.last_transition_at

    def debug(self) -> str:
        """Fetch the raw thermostat status for diagnostics."""
        try:
            response = self.client.get()
        except TransportError as e:
            return f"Thermostat response: {e}\n"
        return f"Thermostat response: {response.status_code}\n{response.text}\n"

    def __str__(self) -> str:
        prefix = f"{self.current_reading} " if self.current_reading else ""
        return f"{prefix}  Time since transition: {int(self.time_since_transition())}"
