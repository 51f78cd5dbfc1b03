# pushcollector/PushInitiator/__init__.py
"""Push initiator subscription protocol: request, transport and outcomes."""

from .register_service import InFlightRequest, RegisterService
from .response_codes import (
    RESPONSE_CODES,
    OutcomeKind,
    RegistrationOutcome,
    classify_response,
)
from .subscribe_request import build_subscribe_url
from .transport import (
    AiohttpPushTransport,
    PushTransport,
    TransportErrorCode,
    TransportFailure,
    TransportSuccess,
)
from .trust_policy import (
    CertificateError,
    CertificateTrustPolicy,
    IgnoreCertificateErrors,
    StrictCertificatePolicy,
)

__all__ = [
    "RESPONSE_CODES",
    "AiohttpPushTransport",
    "CertificateError",
    "CertificateTrustPolicy",
    "IgnoreCertificateErrors",
    "InFlightRequest",
    "OutcomeKind",
    "PushTransport",
    "RegisterService",
    "RegistrationOutcome",
    "StrictCertificatePolicy",
    "TransportErrorCode",
    "TransportFailure",
    "TransportSuccess",
    "build_subscribe_url",
    "classify_response",
]
