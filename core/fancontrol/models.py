"""
Fan Control Data Models

Thermostat readings as decoded from the device's JSON status.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .exceptions import ParseError

HEAT_CALL_ACTIVE = 1


class BlowerMode(IntEnum):
    """Furnace blower fan mode as reported in the thermostat's `fmode` field."""

    AUTO = 0
    CIRCULATE = 1
    ON = 2


@dataclass(frozen=True)
class ThermostatReading:
    """One decoded thermostat status, replaced wholesale on each successful poll."""

    temperature: float
    target_temperature: float
    heat_call_active: bool
    blower_mode: BlowerMode

    @classmethod
    def from_json(cls, data: Any, body: str = "") -> "ThermostatReading":
        """Decode the thermostat's `temp`, `t_heat`, `tstate` and `fmode` fields.

        Args:
            data: Parsed JSON document
            body: Raw response text, kept on the error for diagnostics

        Raises:
            ParseError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ParseError(f"Thermostat data is not a JSON object: {body}", body=body)

        missing = [k for k in ("temp", "t_heat", "tstate", "fmode") if k not in data]
        if missing:
            raise ParseError(f"Missing fields {missing} in thermostat data: {body}", body=body)

        try:
            temperature = _number(data["temp"])
            target_temperature = _number(data["t_heat"])
            tstate = _integer(data["tstate"])
            blower_mode = BlowerMode(_integer(data["fmode"]))
        except (TypeError, ValueError) as e:
            raise ParseError(f"Malformed thermostat data ({e}): {body}", body=body)

        return cls(
            temperature=temperature,
            target_temperature=target_temperature,
            heat_call_active=tstate == HEAT_CALL_ACTIVE,
            blower_mode=blower_mode,
        )

    def __str__(self) -> str:
        return (
            f"State: Temp: {self.temperature} Target: {self.target_temperature} "
            f"Heat On: {int(self.heat_call_active)} Blower: {self.blower_mode.name}"
        )


def _number(value: Any) -> float:
    # bool is an int subclass but never a valid reading
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _integer(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {value!r}")
    return value
