# pushcollector/PushInitiator/trust_policy.py
"""Certificate trust policies consulted by the push transport.

The push initiator's certificate chain is not fully trusted by the default
trust store (missing intermediate issuer, root not trusted for this purpose),
so the default policy lets every connection proceed despite certificate
errors. The policy is injected into the transport so a stricter one can be
substituted without touching the registration logic.
"""

from __future__ import annotations

import logging
import ssl
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CertificateError:
    """One certificate validation error reported for a connection."""

    host: str
    verify_code: int | None
    message: str

    @classmethod
    def from_exception(cls, host: str, err: BaseException) -> CertificateError:
        """Build from an `ssl.SSLCertVerificationError` (or any SSL error)."""
        if isinstance(err, ssl.SSLCertVerificationError):
            return cls(
                host=host,
                verify_code=err.verify_code,
                message=err.verify_message or str(err),
            )
        return cls(host=host, verify_code=None, message=str(err) or type(err).__name__)


@runtime_checkable
class CertificateTrustPolicy(Protocol):
    """Decide whether a connection may proceed despite certificate errors."""

    def should_proceed(self, errors: Sequence[CertificateError]) -> bool:
        """Return True to ignore ``errors`` and continue the request."""
        ...


class IgnoreCertificateErrors:
    """Proceed on every certificate error, for every host."""

    def should_proceed(self, errors: Sequence[CertificateError]) -> bool:
        for error in errors:
            _LOGGER.debug(
                "Ignoring certificate error for %s (code=%s): %s",
                error.host,
                error.verify_code,
                error.message,
            )
        return True


class StrictCertificatePolicy:
    """Abort the request on any certificate error."""

    def should_proceed(self, errors: Sequence[CertificateError]) -> bool:
        for error in errors:
            _LOGGER.warning(
                "Refusing connection to %s due to certificate error (code=%s): %s",
                error.host,
                error.verify_code,
                error.message,
            )
        return False
