from __future__ import annotations

import json
from collections import deque
from typing import Any

import pytest
import requests

from core.fancontrol.device_client import DeviceResponse
from core.fancontrol.settings import FanControlSettings


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDeviceClient:
    """Scripted stand-in for DeviceClient.

    Queued GET results are consumed in order; the last one repeats. POSTs
    are recorded and answered with ``post_result`` (200 by default).
    """

    def __init__(self, url: str = "http://thermostat.test/tstat") -> None:
        self.url = url
        self._gets: deque[DeviceResponse | Exception] = deque()
        self._last_get: DeviceResponse | Exception = device_response(500, "")
        self.posts: list[dict[str, Any]] = []
        self.post_result: DeviceResponse | Exception = device_response(200, "{}")

    def queue_get(self, *results: DeviceResponse | Exception) -> None:
        self._gets.extend(results)

    def get(self) -> DeviceResponse:
        if self._gets:
            self._last_get = self._gets.popleft()
        if isinstance(self._last_get, Exception):
            raise self._last_get
        return self._last_get

    def post(self, payload: dict[str, Any]) -> DeviceResponse:
        self.posts.append(payload)
        if isinstance(self.post_result, Exception):
            raise self.post_result
        return self.post_result


def requests_response(status_code: int, text: str) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response


def device_response(status_code: int, text: str) -> DeviceResponse:
    """Build a DeviceResponse the way DeviceClient does, from a requests response."""
    return DeviceResponse.from_response(requests_response(status_code, text))


def thermostat_response(heat: bool, fmode: int = 0, temp: float = 68.5, target: float = 70.0) -> DeviceResponse:
    body = {"temp": temp, "t_heat": target, "tstate": 1 if heat else 0, "fmode": fmode}
    return device_response(200, json.dumps(body))


@pytest.fixture
def settings() -> FanControlSettings:
    return FanControlSettings(
        thermostat_url="http://thermostat.test/tstat",
        ceiling_fan_urls=("http://fan1.test/mf", "http://fan2.test/mf"),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def thermostat() -> FakeDeviceClient:
    return FakeDeviceClient()
