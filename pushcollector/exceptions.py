# pushcollector/exceptions.py
"""Exception types raised by the push initiator registration client."""

from __future__ import annotations

_IN_PROGRESS = (
    "A push initiator registration is already in progress. Wait for its "
    "outcome before subscribing again."
)


class PushCollectorError(Exception):
    """Base exception for this package."""


class RegistrationInProgressError(PushCollectorError):
    """Raised when a subscribe call arrives while another one is in flight."""

    def __init__(self) -> None:
        super().__init__(_IN_PROGRESS)


class InvalidConfigurationError(PushCollectorError):
    """Raised when stored configuration cannot be read or fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
