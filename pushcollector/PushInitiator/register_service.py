# pushcollector/PushInitiator/register_service.py
"""Subscribe a user to the push initiator and report the outcome.

Flow of one registration attempt:

1. `subscribe()` / `async_subscribe()` captures the `User` and token into an
   `InFlightRequest`. Only one attempt may be in flight; a second call raises
   `RegistrationInProgressError` and leaves the running attempt untouched.
2. A fresh `Configuration` snapshot and the device identity are read.
3. The `/subscribe` URL is built and handed to the transport.
4. The single transport result is turned into a `RegistrationOutcome`.
5. On `rc=200` the captured user is persisted, before anyone is notified.
6. Listeners registered with `on_registration_completed()` are called once.

Every failure (configuration, transport, server error code, unknown response)
is reported as an outcome; nothing is raised to the caller. Unexpected errors
from a collaborator become an `OutcomeKind.INTERNAL_ERROR` outcome. A cancelled
attempt produces no outcome but still frees the service for the next one.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

from .._typing import (
    ConfigurationProvider,
    DeviceInfoProvider,
    RegistrationCompletedCallable,
    RemoveListenerCallable,
    UserPersistence,
)
from ..Auth.user import User
from ..const import UNKNOWN_RESPONSE_CODE
from ..Device.device_info import PlatformDeviceInfo
from ..exceptions import InvalidConfigurationError, RegistrationInProgressError
from .response_codes import (
    OutcomeKind,
    RegistrationOutcome,
    classify_response,
    decode_response,
)
from .subscribe_request import build_subscribe_url, redact_url
from .transport import (
    AiohttpPushTransport,
    PushTransport,
    TransportFailure,
    TransportResult,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InFlightRequest:
    """The registration attempt currently waiting for the push initiator."""

    user: User
    token: str = field(repr=False)
    started_at: float = field(default_factory=time.monotonic)


class RegisterService:
    """Register users with the push initiator, one attempt at a time."""

    def __init__(
        self,
        configuration_service: ConfigurationProvider,
        user_store: UserPersistence,
        *,
        transport: PushTransport | None = None,
        device_info: DeviceInfoProvider | None = None,
        log_debug_verbose: bool = False,
    ) -> None:
        """
        Initialize the register service.

        Args:
            configuration_service: Source of the push initiator configuration.
            user_store: Receives the user after a successful registration.
            transport: Transport performing the HTTPS request. Defaults to an
                `AiohttpPushTransport` owned (and closed) by this service.
            device_info: Device identity provider. Defaults to `PlatformDeviceInfo`.
            log_debug_verbose: If True, enables verbose debug logging.
        """
        self._configuration_service = configuration_service
        self._user_store = user_store
        self._local_transport: AiohttpPushTransport | None = (
            AiohttpPushTransport() if transport is None else None
        )
        self._transport: PushTransport = transport or self._local_transport
        self._device_info: DeviceInfoProvider = device_info or PlatformDeviceInfo()
        self._log_debug_verbose = log_debug_verbose

        self._listeners: list[RegistrationCompletedCallable] = []
        self._in_flight: InFlightRequest | None = None

    # ---------------------------------------------------------------------
    # Listeners
    # ---------------------------------------------------------------------
    def on_registration_completed(
        self, callback: RegistrationCompletedCallable
    ) -> RemoveListenerCallable:
        """Register ``callback(code, description)``; returns a remover."""
        self._listeners.append(callback)

        def _remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _remove

    def _notify(self, outcome: RegistrationOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(outcome.code, outcome.description)
            except Exception:  # a broken listener must not starve the others
                _LOGGER.exception("Registration completed listener raised")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    @property
    def in_flight(self) -> InFlightRequest | None:
        """The attempt currently in flight, if any."""
        return self._in_flight

    def subscribe(self, user: User, token: str) -> asyncio.Task[RegistrationOutcome]:
        """Start a registration and return immediately.

        Must be called from within a running event loop. The returned task
        resolves to the outcome; listeners are notified as well.

        Raises:
            RegistrationInProgressError: If another registration is in flight.
        """
        loop = asyncio.get_running_loop()
        attempt = self._begin(user, token)
        task = loop.create_task(
            self._async_run(attempt), name=f"pushcollector-subscribe-{user.user_id}"
        )
        task.add_done_callback(lambda _task: self._release(attempt))
        return task

    async def async_subscribe(self, user: User, token: str) -> RegistrationOutcome:
        """Perform a registration and return its outcome.

        Raises:
            RegistrationInProgressError: If another registration is in flight.
        """
        attempt = self._begin(user, token)
        return await self._async_run(attempt)

    async def close(self) -> None:
        """Release the transport if this service created it."""
        transport = self._local_transport
        self._local_transport = None
        if transport is not None:
            await transport.close()

    # ---------------------------------------------------------------------
    # Attempt lifecycle
    # ---------------------------------------------------------------------
    def _begin(self, user: User, token: str) -> InFlightRequest:
        if self._in_flight is not None:
            _LOGGER.warning(
                "Rejecting subscribe for %s: registration for %s still in flight",
                user.user_id,
                self._in_flight.user.user_id,
            )
            raise RegistrationInProgressError
        self._in_flight = InFlightRequest(user=user, token=token)
        return self._in_flight

    def _release(self, attempt: InFlightRequest) -> None:
        # A listener may already have started the next attempt.
        if self._in_flight is attempt:
            self._in_flight = None

    async def _async_run(self, attempt: InFlightRequest) -> RegistrationOutcome:
        try:
            try:
                outcome = await self._async_register(attempt)
            except Exception as err:
                _LOGGER.exception(
                    "Registration for %s failed unexpectedly", attempt.user.user_id
                )
                outcome = RegistrationOutcome(
                    code=UNKNOWN_RESPONSE_CODE,
                    description=str(err) or type(err).__name__,
                    kind=OutcomeKind.INTERNAL_ERROR,
                )
        finally:
            self._release(attempt)
        self._log_verbose(
            "Registration for %s finished in %.2fs",
            attempt.user.user_id,
            time.monotonic() - attempt.started_at,
        )
        self._notify(outcome)
        return outcome

    async def _async_register(self, attempt: InFlightRequest) -> RegistrationOutcome:
        loop = asyncio.get_running_loop()

        try:
            config = await loop.run_in_executor(
                None, self._configuration_service.configuration
            )
        except InvalidConfigurationError as err:
            _LOGGER.error("Cannot subscribe %s: %s", attempt.user.user_id, err)
            return RegistrationOutcome(
                code=UNKNOWN_RESPONSE_CODE,
                description=str(err),
                kind=OutcomeKind.CONFIGURATION_ERROR,
            )

        os_version, model = await loop.run_in_executor(None, self._read_device_identity)
        self._log_verbose("Device identity: osversion=%r, model=%r", os_version, model)

        url = build_subscribe_url(attempt.user, attempt.token, config, os_version, model)
        _LOGGER.debug("Subscribing to push initiator: %s", redact_url(url))

        result = await self._transport.async_get(url)
        outcome = self._interpret(result)

        if outcome.success:
            try:
                await self._user_store.async_save(attempt.user)
            except Exception:  # persistence errors are not part of the outcome
                _LOGGER.exception("Failed to persist user %s", attempt.user.user_id)
            _LOGGER.info("Subscribed %s to the push initiator", attempt.user.user_id)
        return outcome

    def _read_device_identity(self) -> tuple[str, str]:
        return self._device_info.os_version(), self._device_info.model()

    def _interpret(self, result: TransportResult) -> RegistrationOutcome:
        if isinstance(result, TransportFailure):
            _LOGGER.warning(
                "Push initiator request failed (code=%s): %s", result.code, result.message
            )
            return RegistrationOutcome.transport_error(result.code, result.message)

        token = decode_response(result.body)
        self._log_verbose("Push initiator returned %r", token)
        outcome = classify_response(token)
        if outcome.kind is OutcomeKind.UNKNOWN_RESPONSE:
            _LOGGER.warning("Push initiator returned an unknown response: %r", token)
        elif not outcome.success:
            _LOGGER.warning(
                "Push initiator rejected the subscription with %s: %s",
                token,
                outcome.description,
            )
        return outcome

    def _log_verbose(self, msg: str, *args: object) -> None:
        """Log a debug message only if verbose logging is enabled."""
        if self._log_debug_verbose:
            _LOGGER.debug(msg, *args)
