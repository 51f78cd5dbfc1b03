# pushcollector/_typing.py
"""Shared typing helpers for the registration client collaborators."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from .Auth.user import User
    from .config import Configuration

RemoveListenerCallable: TypeAlias = Callable[[], None]


class RegistrationCompletedCallable(Protocol):
    """Callable protocol for registration outcome listeners."""

    def __call__(self, code: int, description: str) -> None:
        """Receive the outcome of one registration attempt."""


@runtime_checkable
class ConfigurationProvider(Protocol):
    """Supplies a fresh configuration snapshot per registration attempt."""

    def configuration(self) -> Configuration:
        """Return the current push initiator configuration."""
        ...


@runtime_checkable
class UserPersistence(Protocol):
    """Persists the user record after a successful registration."""

    async def async_save(self, user: User) -> None:
        """Store ``user``; failures are handled by the implementation."""
        ...


@runtime_checkable
class DeviceInfoProvider(Protocol):
    """Reads the device identity sent with a subscription request."""

    def os_version(self) -> str:
        """Return the OS version, or an empty string when unknown."""
        ...

    def model(self) -> str:
        """Return the hardware model, or an empty string when unknown."""
        ...


__all__ = [
    "ConfigurationProvider",
    "DeviceInfoProvider",
    "RegistrationCompletedCallable",
    "RemoveListenerCallable",
    "UserPersistence",
]
