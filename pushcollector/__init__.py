# pushcollector/__init__.py
"""Client for subscribing users to a push initiator."""

from .Auth import User, UserStore
from .config import Configuration, ConfigurationService
from .exceptions import (
    InvalidConfigurationError,
    PushCollectorError,
    RegistrationInProgressError,
)
from .PushInitiator import RegisterService, RegistrationOutcome

__version__ = "1.0.0"

__all__ = [
    "Configuration",
    "ConfigurationService",
    "InvalidConfigurationError",
    "PushCollectorError",
    "RegisterService",
    "RegistrationInProgressError",
    "RegistrationOutcome",
    "User",
    "UserStore",
]
