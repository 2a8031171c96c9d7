"""Furnace blower and ceiling fan control driven by a polled thermostat."""

# Define public API
__all__ = [
    "FanControlSettings",
    "BlowerMode",
    "ThermostatReading",
    "DeviceClient",
    "ThermostatStateTracker",
    "CeilingFan",
    "CeilingFanSynchronizer",
    "BlowerOverrideController",
    "ControlLoopScheduler",
]

# Import settings
from .settings import FanControlSettings

# Import models
from .models import BlowerMode, ThermostatReading

# Import device client
from .device_client import DeviceClient

# Import controllers
from .tracker import ThermostatStateTracker
from .ceiling_fan import CeilingFan, CeilingFanSynchronizer
from .blower import BlowerOverrideController
from .scheduler import ControlLoopScheduler
