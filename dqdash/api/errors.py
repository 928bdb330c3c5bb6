from typing import Optional


class ApiError(Exception):
    """Base class for every failure raised by an analysis client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ValidationError(ApiError):
    """The file was rejected before any request was sent."""


class NetworkError(ApiError):
    """The request went out but no response came back."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


class ServerError(ApiError):
    """The server answered with an error status (or an unreadable body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RequestConfigError(ApiError):
    """The request could not be built locally (bad URL, unreadable payload...)."""
