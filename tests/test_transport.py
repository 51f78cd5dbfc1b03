# tests/test_transport.py
"""Unit tests for the aiohttp push transport."""

from __future__ import annotations

import asyncio
import logging
import socket
import ssl
from collections.abc import Sequence
from types import SimpleNamespace

import aiohttp
import pytest

from pushcollector.PushInitiator.transport import (
    AiohttpPushTransport,
    TransportErrorCode,
    TransportFailure,
    TransportSuccess,
    error_code_for_status,
    failure_from_exception,
)
from pushcollector.PushInitiator.trust_policy import (
    CertificateError,
    IgnoreCertificateErrors,
    StrictCertificatePolicy,
)
from tests.helpers.push import FakeResponse, FakeSession

URL = "https://pi.example/subscribe?appid=app1&password=secret"

_CONN_KEY = SimpleNamespace(host="pi.example", port=443, ssl=True, is_ssl=True)


def _certificate_error() -> aiohttp.ClientConnectorCertificateError:
    cert_error = ssl.SSLCertVerificationError(
        1, "[SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed"
    )
    cert_error.verify_code = 20
    cert_error.verify_message = "unable to get local issuer certificate"
    return aiohttp.ClientConnectorCertificateError(_CONN_KEY, cert_error)


class _RecordingPolicy:
    def __init__(self, proceed: bool) -> None:
        self.proceed = proceed
        self.seen: list[Sequence[CertificateError]] = []

    def should_proceed(self, errors: Sequence[CertificateError]) -> bool:
        self.seen.append(errors)
        return self.proceed


def test_success_returns_body_and_releases_response() -> None:
    response = FakeResponse(status=200, body=b"rc=200")
    session = FakeSession([response])
    transport = AiohttpPushTransport(http_client_session=session)

    result = asyncio.run(transport.async_get(URL))

    assert result == TransportSuccess(body=b"rc=200", status=200)
    assert response.released
    assert session.calls[0]["url"] == URL
    assert session.calls[0]["ssl"] is True
    assert session.calls[0]["timeout"] is AiohttpPushTransport.CLIENT_TIMEOUT


def test_default_policy_ignores_certificate_errors(
    caplog: pytest.LogCaptureFixture,
) -> None:
    session = FakeSession([_certificate_error(), FakeResponse(body=b"rc=200")])
    transport = AiohttpPushTransport(http_client_session=session)

    with caplog.at_level(logging.DEBUG):
        result = asyncio.run(transport.async_get(URL))

    assert isinstance(transport.trust_policy, IgnoreCertificateErrors)
    assert result == TransportSuccess(body=b"rc=200")
    assert [call["ssl"] for call in session.calls] == [True, False]
    assert any(
        "Ignoring certificate error for pi.example" in record.getMessage()
        and "unable to get local issuer certificate" in record.getMessage()
        for record in caplog.records
    )


def test_policy_receives_certificate_details() -> None:
    policy = _RecordingPolicy(proceed=True)
    session = FakeSession([_certificate_error(), FakeResponse(body=b"rc=10026")])
    transport = AiohttpPushTransport(trust_policy=policy, http_client_session=session)

    result = asyncio.run(transport.async_get(URL))

    assert result == TransportSuccess(body=b"rc=10026")
    assert policy.seen == [
        [
            CertificateError(
                host="pi.example",
                verify_code=20,
                message="unable to get local issuer certificate",
            )
        ]
    ]


def test_strict_policy_turns_certificate_error_into_failure() -> None:
    session = FakeSession([_certificate_error()])
    transport = AiohttpPushTransport(
        trust_policy=StrictCertificatePolicy(), http_client_session=session
    )

    result = asyncio.run(transport.async_get(URL))

    assert isinstance(result, TransportFailure)
    assert result.code == TransportErrorCode.SSL_HANDSHAKE_FAILED
    assert len(session.calls) == 1


def test_ignore_policy_always_proceeds() -> None:
    errors = [
        CertificateError("a.example", 20, "unable to get local issuer certificate"),
        CertificateError("b.example", 26, "unsupported certificate purpose"),
        CertificateError("c.example", None, "handshake failure"),
    ]
    policy = IgnoreCertificateErrors()

    assert policy.should_proceed(errors)
    assert policy.should_proceed(errors[:1])
    assert policy.should_proceed([])


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, TransportErrorCode.AUTHENTICATION_REQUIRED),
        (403, TransportErrorCode.CONTENT_ACCESS_DENIED),
        (404, TransportErrorCode.CONTENT_NOT_FOUND),
        (418, TransportErrorCode.UNKNOWN_CONTENT),
        (500, TransportErrorCode.INTERNAL_SERVER_ERROR),
        (503, TransportErrorCode.SERVICE_UNAVAILABLE),
        (599, TransportErrorCode.UNKNOWN_SERVER),
    ],
)
def test_http_error_status_is_a_transport_failure(
    status: int, expected: TransportErrorCode
) -> None:
    response = FakeResponse(status=status, body=b"<html>oops</html>", reason="Nope")
    session = FakeSession([response])
    transport = AiohttpPushTransport(http_client_session=session)

    result = asyncio.run(transport.async_get(URL))

    assert result == TransportFailure(expected, f"Server replied: {status} Nope")
    assert error_code_for_status(status) is expected
    assert response.released


def test_connection_refused() -> None:
    err = aiohttp.ClientConnectorError(
        _CONN_KEY, ConnectionRefusedError(111, "Connection refused")
    )
    session = FakeSession([err])
    transport = AiohttpPushTransport(http_client_session=session)

    result = asyncio.run(transport.async_get(URL))

    assert isinstance(result, TransportFailure)
    assert result.code == TransportErrorCode.CONNECTION_REFUSED
    assert "Connection refused" in result.message


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (
            aiohttp.ClientConnectorError(
                _CONN_KEY, socket.gaierror(-2, "Name or service not known")
            ),
            TransportErrorCode.HOST_NOT_FOUND,
        ),
        (
            aiohttp.ClientConnectorError(_CONN_KEY, OSError(101, "Network is unreachable")),
            TransportErrorCode.UNKNOWN_NETWORK,
        ),
        (asyncio.TimeoutError(), TransportErrorCode.TIMEOUT),
        (aiohttp.ServerDisconnectedError(), TransportErrorCode.REMOTE_HOST_CLOSED),
        (aiohttp.InvalidURL("/subscribe"), TransportErrorCode.PROTOCOL_UNKNOWN),
        (aiohttp.ClientPayloadError("truncated"), TransportErrorCode.PROTOCOL_FAILURE),
        (aiohttp.ClientError("boom"), TransportErrorCode.UNKNOWN_NETWORK),
    ],
)
def test_exceptions_map_to_error_codes(
    error: BaseException, expected: TransportErrorCode
) -> None:
    session = FakeSession([error])
    transport = AiohttpPushTransport(http_client_session=session)

    result = asyncio.run(transport.async_get(URL))

    assert isinstance(result, TransportFailure)
    assert result.code == expected
    assert result.message


def test_timeout_message_is_descriptive() -> None:
    failure = failure_from_exception(asyncio.TimeoutError())

    assert failure == TransportFailure(TransportErrorCode.TIMEOUT, "Operation timed out")


def test_close_only_closes_local_session() -> None:
    session = FakeSession([])
    transport = AiohttpPushTransport(http_client_session=session)

    asyncio.run(transport.close())

    assert transport._local_session is None
