"""
Simple HTTP client for the thermostat and ceiling fans.

Each device exposes a single JSON endpoint: GET reads its state and POST
with a small JSON body changes it.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .exceptions import ParseError, TransportError, TransportTimeout

logger = logging.getLogger(__name__)

HTTP_OK = 200


@dataclass(frozen=True)
class DeviceResponse:
    """Status code and raw body of one device exchange."""

    status_code: int
    text: str
    data: Any = None
    decode_error: Optional[str] = None

    @classmethod
    def from_response(cls, response: requests.Response) -> "DeviceResponse":
        """Capture status, body and decoded JSON from a requests response."""
        try:
            return cls(response.status_code, response.text, data=response.json())
        except requests.exceptions.JSONDecodeError as e:
            return cls(response.status_code, response.text, decode_error=str(e))

    @property
    def ok(self) -> bool:
        return self.status_code == HTTP_OK

    def json(self) -> Any:
        """Decoded body.

        Raises:
            ParseError: If the body was empty or not valid JSON
        """
        if self.decode_error is not None:
            raise ParseError(f"Invalid JSON ({self.decode_error}): {self.text}", body=self.text)
        return self.data


class DeviceClient:
    """Blocking JSON-over-HTTP client bound to one device URL."""

    def __init__(self, url: str, timeout: float = 10.0):
        """Initialize device client.

        Args:
            url: Device endpoint (e.g., "http://192.168.0.73/tstat")
            timeout: Per-request timeout in seconds
        """
        self.url = url
        self.timeout = timeout
        # One session per device, reused across polls
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "charset": "utf-8",
            }
        )

    def get(self) -> DeviceResponse:
        """Read the device state.

        Raises:
            TransportError: If the device cannot be reached
        """
        return self._request("GET")

    def post(self, payload: dict[str, Any]) -> DeviceResponse:
        """Send a JSON command to the device.

        Args:
            payload: JSON body (e.g., {"fanSpeed": 2})

        Raises:
            TransportError: If the device cannot be reached
        """
        return self._request("POST", payload)

    def _request(self, method: str, payload: dict[str, Any] | None = None) -> DeviceResponse:
        start = time.monotonic()
        try:
            response = self.session.request(
                method,
                self.url,
                json=payload,
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.exceptions.Timeout as e:
            raise TransportTimeout(f"{method} {self.url} timed out: {e}", url=self.url)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {self.url} failed: {e}", url=self.url)

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(f"{method} {self.url} -> {response.status_code} ({elapsed_ms:.0f} ms)")
        return DeviceResponse.from_response(response)
