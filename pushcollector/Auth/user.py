# pushcollector/Auth/user.py
"""User identity submitted to the push initiator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..const import CONF_PASSWORD, CONF_USER_ID


@dataclass(frozen=True, slots=True)
class User:
    """Credentials for one push initiator subscriber.

    Instances are immutable, so the copy captured when a registration starts is
    exactly the one persisted when it succeeds.
    """

    user_id: str
    password: str = field(repr=False)

    def as_dict(self) -> dict[str, str]:
        """Return the storage representation."""
        return {CONF_USER_ID: self.user_id, CONF_PASSWORD: self.password}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> User:
        """Build a user from its storage representation."""
        return cls(
            user_id=str(data[CONF_USER_ID]),
            password=str(data[CONF_PASSWORD]),
        )
