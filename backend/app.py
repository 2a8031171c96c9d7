"""
Fan Control Application

Runs the control loop forever. With a first argument starting with "-d"
it instead queries every device once, prints the raw responses and exits.
"""

import os
import sys

import log_config  # noqa: F401
from loguru import logger

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.fancontrol.blower import BlowerOverrideController
from core.fancontrol.ceiling_fan import CeilingFan, CeilingFanSynchronizer
from core.fancontrol.device_client import DeviceClient
from core.fancontrol.exceptions import ConfigurationError
from core.fancontrol.scheduler import ControlLoopScheduler
from core.fancontrol.settings import FanControlSettings
from core.fancontrol.tracker import ThermostatStateTracker


def build_scheduler(settings: FanControlSettings) -> ControlLoopScheduler:
    """Wire the tracker and fan controllers for one thermostat."""
    thermostat_client = DeviceClient(settings.thermostat_url, timeout=settings.http_timeout)
    tracker = ThermostatStateTracker(thermostat_client, settings)

    controllers = [
        CeilingFanSynchronizer(CeilingFan(DeviceClient(url, timeout=settings.http_timeout)), settings)
        for url in settings.ceiling_fan_urls
    ]
    # The blower is commanded through the thermostat's own endpoint
    controllers.append(BlowerOverrideController(thermostat_client, settings))

    return ControlLoopScheduler(tracker, controllers, settings.poll_period)


def main(argv: list[str]) -> int:
    try:
        settings = FanControlSettings.from_env()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    scheduler = build_scheduler(settings)

    if len(argv) > 1 and argv[1].startswith("-d"):
        print("Fetching Debug data")
        scheduler.run_diagnostics(sys.stdout)
        return 0

    logger.info(f"Fan control starting (thermostat: {settings.thermostat_url})")
    scheduler.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
