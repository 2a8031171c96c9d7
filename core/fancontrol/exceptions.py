"""
Fan Control Custom Exceptions

Every device error is handled by the component that issued the request.
None of these stop the control loop.
"""


class FanControlError(Exception):
    """Base exception for fan control."""

    pass


class ConfigurationError(FanControlError):
    """Configuration is invalid."""

    pass


class TransportError(FanControlError):
    """Cannot reach a device (connection refused, DNS, timeout)."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class TransportTimeout(TransportError):
    """Device did not answer within the per-request timeout."""

    pass


class HttpStatusError(FanControlError):
    """Device answered with a non-200 status."""

    def __init__(self, message: str, status_code: int, body: str = "", url: str = ""):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(message)


class ParseError(FanControlError):
    """Device response is missing expected JSON fields or is malformed."""

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)


class CommandFailure(HttpStatusError):
    """A state-changing command was rejected by the device."""

    pass
