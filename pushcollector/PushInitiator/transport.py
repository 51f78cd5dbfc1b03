# pushcollector/PushInitiator/transport.py
"""Asynchronous HTTPS transport used to reach the push initiator.

`AiohttpPushTransport.async_get()` performs one GET request and always returns
a tagged result: `TransportSuccess` with the raw body, or `TransportFailure`
with a numeric error identifier and a human readable message. It never raises
for network, TLS or HTTP-level failures.

Certificate validation errors are handed to the injected
`CertificateTrustPolicy`. When the policy lets the connection proceed the
request is issued again without certificate verification; otherwise the
attempt fails with `TransportErrorCode.SSL_HANDSHAKE_FAILED`.
"""

from __future__ import annotations

import logging
import socket
import ssl
from dataclasses import dataclass
from enum import IntEnum
from http import HTTPStatus
from typing import Protocol, TypeAlias, runtime_checkable

import aiohttp
from aiohttp import ClientSession, ClientTimeout

from ..const import CLIENT_TIMEOUT_S
from .subscribe_request import redact_url
from .trust_policy import (
    CertificateError,
    CertificateTrustPolicy,
    IgnoreCertificateErrors,
)

_LOGGER = logging.getLogger(__name__)


class TransportErrorCode(IntEnum):
    """Numeric identifiers reported for failed requests."""

    CONNECTION_REFUSED = 1
    REMOTE_HOST_CLOSED = 2
    HOST_NOT_FOUND = 3
    TIMEOUT = 4
    SSL_HANDSHAKE_FAILED = 6
    UNKNOWN_NETWORK = 99
    CONTENT_ACCESS_DENIED = 201
    CONTENT_OPERATION_NOT_PERMITTED = 202
    CONTENT_NOT_FOUND = 203
    AUTHENTICATION_REQUIRED = 204
    CONTENT_CONFLICT = 206
    CONTENT_GONE = 207
    UNKNOWN_CONTENT = 299
    PROTOCOL_UNKNOWN = 301
    PROTOCOL_FAILURE = 399
    INTERNAL_SERVER_ERROR = 401
    OPERATION_NOT_IMPLEMENTED = 402
    SERVICE_UNAVAILABLE = 403
    UNKNOWN_SERVER = 499


_STATUS_ERROR_CODES: dict[int, TransportErrorCode] = {
    HTTPStatus.UNAUTHORIZED: TransportErrorCode.AUTHENTICATION_REQUIRED,
    HTTPStatus.FORBIDDEN: TransportErrorCode.CONTENT_ACCESS_DENIED,
    HTTPStatus.NOT_FOUND: TransportErrorCode.CONTENT_NOT_FOUND,
    HTTPStatus.METHOD_NOT_ALLOWED: TransportErrorCode.CONTENT_OPERATION_NOT_PERMITTED,
    HTTPStatus.CONFLICT: TransportErrorCode.CONTENT_CONFLICT,
    HTTPStatus.GONE: TransportErrorCode.CONTENT_GONE,
    HTTPStatus.INTERNAL_SERVER_ERROR: TransportErrorCode.INTERNAL_SERVER_ERROR,
    HTTPStatus.NOT_IMPLEMENTED: TransportErrorCode.OPERATION_NOT_IMPLEMENTED,
    HTTPStatus.SERVICE_UNAVAILABLE: TransportErrorCode.SERVICE_UNAVAILABLE,
}

HTTP_CLIENT_ERROR_MIN = 400
HTTP_SERVER_ERROR_MIN = 500


@dataclass(frozen=True, slots=True)
class TransportSuccess:
    """The request completed and produced a response body."""

    body: bytes
    status: int = HTTPStatus.OK


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """The request failed before a usable response body was received."""

    code: int
    message: str


TransportResult: TypeAlias = TransportSuccess | TransportFailure


@runtime_checkable
class PushTransport(Protocol):
    """Transport contract consumed by the register service."""

    async def async_get(self, url: str) -> TransportResult:
        """Issue a GET request and deliver exactly one completion result."""
        ...


def error_code_for_status(status: int) -> TransportErrorCode:
    """Return the error identifier for an HTTP error status (>= 400)."""
    if status in _STATUS_ERROR_CODES:
        return _STATUS_ERROR_CODES[status]
    if status >= HTTP_SERVER_ERROR_MIN:
        return TransportErrorCode.UNKNOWN_SERVER
    return TransportErrorCode.UNKNOWN_CONTENT


def failure_from_exception(err: BaseException) -> TransportFailure:
    """Translate an aiohttp/asyncio exception into a `TransportFailure`."""
    detail = str(err)
    message = detail or type(err).__name__

    if isinstance(err, aiohttp.InvalidURL):
        return TransportFailure(TransportErrorCode.PROTOCOL_UNKNOWN, message)
    if isinstance(err, TimeoutError):
        return TransportFailure(TransportErrorCode.TIMEOUT, detail or "Operation timed out")
    if isinstance(err, aiohttp.ClientSSLError):
        return TransportFailure(TransportErrorCode.SSL_HANDSHAKE_FAILED, message)
    if isinstance(err, aiohttp.ClientConnectorError):
        os_error = err.os_error
        if isinstance(os_error, socket.gaierror):
            return TransportFailure(TransportErrorCode.HOST_NOT_FOUND, message)
        if isinstance(os_error, ConnectionRefusedError):
            return TransportFailure(TransportErrorCode.CONNECTION_REFUSED, message)
        if isinstance(os_error, ssl.SSLError):
            return TransportFailure(TransportErrorCode.SSL_HANDSHAKE_FAILED, message)
        return TransportFailure(TransportErrorCode.UNKNOWN_NETWORK, message)
    if isinstance(err, aiohttp.ServerDisconnectedError):
        return TransportFailure(TransportErrorCode.REMOTE_HOST_CLOSED, message)
    if isinstance(err, aiohttp.ClientPayloadError | aiohttp.ClientResponseError):
        return TransportFailure(TransportErrorCode.PROTOCOL_FAILURE, message)
    return TransportFailure(TransportErrorCode.UNKNOWN_NETWORK, message)


class AiohttpPushTransport:
    """`PushTransport` implementation on top of an aiohttp `ClientSession`."""

    CLIENT_TIMEOUT = ClientTimeout(total=CLIENT_TIMEOUT_S)

    def __init__(
        self,
        *,
        trust_policy: CertificateTrustPolicy | None = None,
        http_client_session: ClientSession | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            trust_policy: Decides whether certificate errors are ignored. Defaults
                to `IgnoreCertificateErrors`.
            http_client_session: Optional aiohttp ClientSession to reuse.
            ssl_context: Optional context used for the verified first attempt.
        """
        self._trust_policy: CertificateTrustPolicy = (
            trust_policy if trust_policy is not None else IgnoreCertificateErrors()
        )
        self._ssl: ssl.SSLContext | bool = ssl_context if ssl_context is not None else True
        self._http_client_session: ClientSession | None = http_client_session
        self._local_session: ClientSession | None = None

    @property
    def trust_policy(self) -> CertificateTrustPolicy:
        return self._trust_policy

    async def async_get(self, url: str) -> TransportResult:
        """Issue a GET request to ``url``; see the module docstring for semantics."""
        try:
            try:
                return await self._async_fetch(url, ssl_option=self._ssl)
            except aiohttp.ClientConnectorCertificateError as err:
                errors = [CertificateError.from_exception(err.host, err.certificate_error)]
                if not self._trust_policy.should_proceed(errors):
                    raise
                _LOGGER.debug(
                    "Certificate errors ignored; re-issuing request to %s without verification",
                    err.host,
                )
                return await self._async_fetch(url, ssl_option=False)
        except (aiohttp.ClientError, TimeoutError) as err:
            failure = failure_from_exception(err)
            _LOGGER.debug(
                "Request to %s failed (%s): %s",
                redact_url(url),
                TransportErrorCode(failure.code).name,
                failure.message,
            )
            return failure

    async def _async_fetch(
        self, url: str, *, ssl_option: ssl.SSLContext | bool
    ) -> TransportResult:
        """Perform the GET request; the response is released when the block exits."""
        async with self._session.get(
            url, ssl=ssl_option, timeout=self.CLIENT_TIMEOUT
        ) as resp:
            body = await resp.read()
            status = resp.status
            if status >= HTTP_CLIENT_ERROR_MIN:
                return TransportFailure(
                    error_code_for_status(status),
                    f"Server replied: {status} {resp.reason or ''}".rstrip(),
                )
            return TransportSuccess(body=body, status=status)

    @property
    def _session(self) -> ClientSession:
        """Return the aiohttp session, creating one if it doesn't exist."""
        if self._http_client_session:
            return self._http_client_session
        if self._local_session is None:
            self._local_session = ClientSession()
        return self._local_session

    async def close(self) -> None:
        """Close the local aiohttp session if one was created."""
        session = self._local_session
        self._local_session = None
        if session:
            await session.close()
