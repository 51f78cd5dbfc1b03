# pushcollector/PushInitiator/response_codes.py
"""Push initiator response vocabulary and registration outcomes.

The push initiator answers a subscribe request with a single token of the form
``rc=<integer>``. :data:`RESPONSE_CODES` maps every token the server is known
to send to its outcome; anything else is reported as an unknown response with
the raw token embedded in the description.

Classification is pure. Side effects (persisting the user) are applied by the
register service once the outcome is known.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from ..const import RESPONSE_SUCCESS, UNKNOWN_RESPONSE_CODE


class OutcomeKind(StrEnum):
    """Which branch of the registration produced an outcome."""

    SUCCESS = "success"
    SERVER_ERROR = "server_error"
    UNKNOWN_RESPONSE = "unknown_response"
    TRANSPORT_ERROR = "transport_error"
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True, slots=True)
class RegistrationOutcome:
    """Result of one registration attempt."""

    code: int
    description: str = ""
    kind: OutcomeKind = OutcomeKind.SERVER_ERROR

    @property
    def success(self) -> bool:
        """True only for the canonical `rc=200` answer."""
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def transport_error(cls, code: int, message: str) -> RegistrationOutcome:
        """Outcome for a request that never produced a response body."""
        return cls(code=code, description=message, kind=OutcomeKind.TRANSPORT_ERROR)


def _server_error(code: int, description: str) -> RegistrationOutcome:
    return RegistrationOutcome(code=code, description=description)


RESPONSE_CODES: Mapping[str, RegistrationOutcome] = MappingProxyType(
    {
        RESPONSE_SUCCESS: RegistrationOutcome(code=200, kind=OutcomeKind.SUCCESS),
        "rc=10001": _server_error(
            10001,
            "Error: The token from the create channel was null, empty, or longer "
            "than 40 characters in length.",
        ),
        # Only seen when the OS version or model sent in the request is wrong.
        "rc=10011": _server_error(
            10011,
            "Error: The OS version or device model of the BlackBerry was invalid.",
        ),
        "rc=10002": _server_error(
            10002,
            "Error: The application ID specified in the configuration settings "
            "could not be found, or it was found to be inactive or expired.",
        ),
        "rc=10020": _server_error(
            10020,
            "Error: The subscriber ID generated by the Push Initiator (based on the "
            "username and password specified) was null or empty, longer than 42 "
            "characters in length, or matched the 'push_all' keyword.",
        ),
        "rc=10025": _server_error(
            10025,
            "Error: The Push Initiator application has the bypass subscription flag "
            "set to true (so no subscribe is allowed).",
        ),
        "rc=10026": _server_error(
            10026,
            "Error: The username or password specified was incorrect.",
        ),
        "rc=10027": _server_error(
            10027,
            "Error: A CPSubscriptionFailureException was thrown by the "
            "onSubscribeSuccess method of the implementation being used of the "
            "ContentProviderSubscriptionService interface.",
        ),
        "rc=10028": _server_error(
            10028,
            "Error: The type specified was null, empty, or not one of 'public' or "
            "'bds', or invalid for the push application type.",
        ),
        "rc=-9999": _server_error(-9999, "Error: General error (i.e. rc=-9999)."),
    }
)


def decode_response(body: bytes) -> str:
    """Decode a response body the way the push initiator encodes it (UTF-8)."""
    return body.decode("utf-8", errors="replace")


def classify_response(token: str) -> RegistrationOutcome:
    """Map a push initiator response token to its outcome.

    The match is exact: surrounding whitespace or a trailing newline makes the
    token unknown.
    """
    outcome = RESPONSE_CODES.get(token)
    if outcome is not None:
        return outcome
    return RegistrationOutcome(
        code=UNKNOWN_RESPONSE_CODE,
        description=f"Error: Unknown error code: {token}.",
        kind=OutcomeKind.UNKNOWN_RESPONSE,
    )
