"""Common interface for everything the control loop drives after a poll."""

from abc import ABC, abstractmethod

from .device_client import DeviceClient
from .tracker import ThermostatStateTracker


class FanController(ABC):
    """A fan whose behaviour follows the thermostat's heat call."""

    def __init__(self, client: DeviceClient):
        self.client = client

    @abstractmethod
    def tick(self, tracker: ThermostatStateTracker) -> None:
        """React to the tracker's latest successful poll."""

    @abstractmethod
    def debug(self) -> str:
        """Query the device once and return its raw response."""
