from __future__ import annotations

import logging

from conftest import FakeClock, FakeDeviceClient, device_response, thermostat_response

from core.fancontrol.blower import BlowerOverrideController
from core.fancontrol.exceptions import TransportError
from core.fancontrol.models import BlowerMode
from core.fancontrol.settings import FanControlSettings
from core.fancontrol.tracker import ThermostatStateTracker

ON = {"fmode": 2}
AUTO = {"fmode": 0}


def _setup(settings: FanControlSettings, clock: FakeClock, thermostat: FakeDeviceClient):
    blower = BlowerOverrideController(thermostat, settings)
    tracker = ThermostatStateTracker(thermostat, settings, clock=clock)
    return blower, tracker


def _step(tracker, blower, clock, seconds: float = 15) -> None:
    assert tracker.poll()
    blower.tick(tracker)
    clock.advance(seconds)


def test_idle_at_start_up(settings, clock, thermostat) -> None:
    thermostat.queue_get(thermostat_response(heat=False, fmode=0))
    blower, tracker = _setup(settings, clock, thermostat)

    for _ in range(5):
        _step(tracker, blower, clock)

    assert thermostat.posts == []
    assert blower.latched_mode is None


def test_override_after_heat_stops_then_restores(settings, clock, thermostat) -> None:
    thermostat.queue_get(
        thermostat_response(heat=True, fmode=0),
        thermostat_response(heat=False, fmode=0),  # t=0, heat stops
        thermostat_response(heat=False, fmode=2),  # thermostat now reports the forced ON
    )
    blower, tracker = _setup(settings, clock, thermostat)
    _step(tracker, blower, clock)
    assert thermostat.posts == []

    _step(tracker, blower, clock)
    assert blower.latched_mode is BlowerMode.AUTO
    assert thermostat.posts == [ON]

    # Inside the tail window the device already reports ON: nothing to send
    for _ in range(22):
        _step(tracker, blower, clock)
    assert thermostat.posts == [ON]
    assert tracker.time_since_transition() == 345

    # t=345: still in the window
    _step(tracker, blower, clock)
    assert thermostat.posts == [ON]

    # t=360: boundary falls into disengage
    _step(tracker, blower, clock)
    assert thermostat.posts == [ON, AUTO]
    assert blower.latched_mode is BlowerMode.AUTO

    # Restore is repeated until the thermostat confirms it
    _step(tracker, blower, clock)
    assert thermostat.posts == [ON, AUTO, AUTO]

    thermostat.queue_get(thermostat_response(heat=False, fmode=0))
    _step(tracker, blower, clock)
    assert blower.latched_mode is None
    assert thermostat.posts == [ON, AUTO, AUTO]

    _step(tracker, blower, clock)
    assert thermostat.posts == [ON, AUTO, AUTO]


def test_heat_resuming_restores_immediately(settings, clock, thermostat) -> None:
    thermostat.queue_get(
        thermostat_response(heat=True, fmode=1),
        thermostat_response(heat=False, fmode=1),
        thermostat_response(heat=False, fmode=2),
        thermostat_response(heat=True, fmode=2),
    )
    blower, tracker = _setup(settings, clock, thermostat)
    _step(tracker, blower, clock)
    _step(tracker, blower, clock)
    _step(tracker, blower, clock)
    assert thermostat.posts == [ON]
    assert blower.latched_mode is BlowerMode.CIRCULATE

    # Heat back on 30s into the window
    _step(tracker, blower, clock)

    assert thermostat.posts == [ON, {"fmode": 1}]


def test_latch_captured_once_per_episode(settings, clock, thermostat) -> None:
    thermostat.queue_get(
        thermostat_response(heat=True, fmode=1),
        thermostat_response(heat=False, fmode=1),
        thermostat_response(heat=False, fmode=0),
    )
    blower, tracker = _setup(settings, clock, thermostat)
    _step(tracker, blower, clock)
    _step(tracker, blower, clock)
    # Someone changes the mode mid-override; the original mode is still what gets restored
    _step(tracker, blower, clock)

    assert blower.latched_mode is BlowerMode.CIRCULATE
    assert thermostat.posts == [ON, ON]


def test_natural_mode_on_needs_no_commands(settings, clock, thermostat) -> None:
    thermostat.queue_get(
        thermostat_response(heat=True, fmode=2),
        thermostat_response(heat=False, fmode=2),
    )
    blower, tracker = _setup(settings, clock, thermostat)
    _step(tracker, blower, clock)
    _step(tracker, blower, clock)
    assert blower.latched_mode is BlowerMode.ON

    clock.advance(settings.blower_tail_window)
    _step(tracker, blower, clock)

    assert blower.latched_mode is None
    assert thermostat.posts == []


def test_failed_command_logged_and_retried(settings, clock, thermostat, caplog) -> None:
    thermostat.queue_get(
        thermostat_response(heat=True, fmode=0),
        thermostat_response(heat=False, fmode=0),
    )
    blower, tracker = _setup(settings, clock, thermostat)
    _step(tracker, blower, clock)
    thermostat.post_result = device_response(500, "nope")

    with caplog.at_level(logging.ERROR, logger="core.fancontrol.blower"):
        _step(tracker, blower, clock)
        thermostat.post_result = TransportError("timed out", url=thermostat.url)
        _step(tracker, blower, clock)

    assert len(caplog.records) == 2
    assert "500" in caplog.records[0].getMessage()
    assert "nope" in caplog.records[0].getMessage()
    assert thermostat.posts == [ON, ON]

    thermostat.post_result = device_response(200, "{}")
    _step(tracker, blower, clock)
    assert thermostat.posts == [ON, ON, ON]


def test_set_blower_mode_reports_result(settings, thermostat) -> None:
    blower = BlowerOverrideController(thermostat, settings)

    assert blower.set_blower_mode(BlowerMode.CIRCULATE) is True
    thermostat.post_result = device_response(400, "bad")
    assert blower.set_blower_mode(BlowerMode.CIRCULATE) is False
    assert thermostat.posts == [{"fmode": 1}, {"fmode": 1}]


def test_debug_reads_thermostat(settings, thermostat) -> None:
    thermostat.queue_get(device_response(200, '{"fmode": 0}'))
    blower = BlowerOverrideController(thermostat, settings)

    assert blower.debug() == 'Thermostat response: 200\n{"fmode": 0}\n'


def test_rejected_command_logged_without_raising(settings, thermostat, caplog) -> None:
    blower = BlowerOverrideController(thermostat, settings)
    thermostat.post_result = device_response(503, "busy")

    with caplog.at_level(logging.INFO, logger="core.fancontrol.blower"):
        assert blower.set_blower_mode(BlowerMode.ON) is False

    assert [r.levelno for r in caplog.records] == [logging.ERROR]
    assert "503 : busy" in caplog.records[0].getMessage()
