"""
Fan Control Configuration Settings

All timings and speeds are fixed at start-up. Defaults match the
original installation; deployments override them through FANCONTROL_*
environment variables (optionally from a .env file).
"""

import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigurationError

DEFAULT_CEILING_FAN_URLS = (
    "http://192.168.0.75/mf",
    "http://192.168.0.76/mf",
    "http://192.168.0.77/mf",
)


@dataclass(frozen=True)
class FanControlSettings:
    """Immutable configuration shared by the tracker and every fan controller."""

    thermostat_url: str = "http://192.168.0.73/tstat"
    ceiling_fan_urls: tuple[str, ...] = field(default=DEFAULT_CEILING_FAN_URLS)
    poll_period: float = 15.0  # seconds between thermostat polls
    blower_tail_window: float = 6 * 60.0  # keep the blower running this long after heat stops
    ceiling_fan_on_delay: float = 60.0  # warm air takes about a minute to arrive
    ceiling_fan_off_delay: float = 180.0  # and longer to dissipate
    heat_on_fan_speed: int = 2
    heat_off_fan_speed: int = 1
    # Simple requests have been seen taking far longer than 3-4 seconds.
    http_timeout: float = 10.0
    failure_report_interval: int = 6

    def __post_init__(self):
        if not self.thermostat_url:
            raise ConfigurationError("thermostat_url must not be empty")
        if not self.ceiling_fan_urls:
            raise ConfigurationError("At least one ceiling fan URL is required")
        if self.poll_period <= 0:
            raise ConfigurationError(f"poll_period must be positive, got {self.poll_period}")
        if self.http_timeout <= 0:
            raise ConfigurationError(f"http_timeout must be positive, got {self.http_timeout}")
        if self.failure_report_interval <= 0:
            raise ConfigurationError(
                f"failure_report_interval must be positive, got {self.failure_report_interval}"
            )
        for name in ("blower_tail_window", "ceiling_fan_on_delay", "ceiling_fan_off_delay"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")
        # Before the first heat transition the tracker reports the tail window as
        # elapsed time, so a longer fan delay would never be reached
        for name in ("ceiling_fan_on_delay", "ceiling_fan_off_delay"):
            if getattr(self, name) >= self.blower_tail_window:
                raise ConfigurationError(
                    f"{name} ({getattr(self, name)}) must be shorter than "
                    f"blower_tail_window ({self.blower_tail_window})"
                )

    @classmethod
    def from_env(cls, **overrides: Any) -> "FanControlSettings":
        """Create settings from FANCONTROL_* environment variables.

        Args:
            **overrides: Explicit field values that take precedence over env vars

        Returns:
            Populated settings

        Raises:
            ConfigurationError: If a variable cannot be converted or a value is invalid
        """
        load_dotenv()
        env = os.environ

        env_map = {
            "FANCONTROL_THERMOSTAT_URL": ("thermostat_url", str),
            "FANCONTROL_POLL_PERIOD": ("poll_period", float),
            "FANCONTROL_BLOWER_TAIL_WINDOW": ("blower_tail_window", float),
            "FANCONTROL_CEILING_FAN_ON_DELAY": ("ceiling_fan_on_delay", float),
            "FANCONTROL_CEILING_FAN_OFF_DELAY": ("ceiling_fan_off_delay", float),
            "FANCONTROL_HEAT_ON_FAN_SPEED": ("heat_on_fan_speed", int),
            "FANCONTROL_HEAT_OFF_FAN_SPEED": ("heat_off_fan_speed", int),
            "FANCONTROL_HTTP_TIMEOUT": ("http_timeout", float),
            "FANCONTROL_FAILURE_REPORT_INTERVAL": ("failure_report_interval", int),
        }

        kwargs: dict[str, Any] = {}
        for env_key, (field_name, convert) in env_map.items():
            value = env.get(env_key)
            if value is None or field_name in overrides:
                continue
            try:
                kwargs[field_name] = convert(value)
            except ValueError:
                raise ConfigurationError(f"Invalid value for {env_key}: {value!r}")

        fan_urls = env.get("FANCONTROL_CEILING_FAN_URLS")
        if fan_urls is not None and "ceiling_fan_urls" not in overrides:
            kwargs["ceiling_fan_urls"] = tuple(u.strip() for u in fan_urls.split(",") if u.strip())

        kwargs.update(overrides)
        if "ceiling_fan_urls" in kwargs:
            kwargs["ceiling_fan_urls"] = tuple(kwargs["ceiling_fan_urls"])

        return cls(**kwargs)
