"""tests/conftest.py: Common fixtures for the push initiator tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from pushcollector.Auth.user import User
from pushcollector.config import Configuration
from pushcollector.Device.device_info import StaticDeviceInfo
from pushcollector.PushInitiator.register_service import RegisterService
from pushcollector.PushInitiator.transport import TransportResult, TransportSuccess
from tests.helpers.push import (
    FakeConfigurationService,
    FakeTransport,
    FakeUserStore,
)


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real per-user configuration directory."""

    config_dir = tmp_path / "config"
    monkeypatch.setenv("PUSHCOLLECTOR_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def alice() -> User:
    return User(user_id="alice", password="secret")


@pytest.fixture
def configuration() -> Configuration:
    return Configuration(
        push_initiator_url="https://pi.example",
        provider_application_id="app1",
        using_public_push_proxy_gateway=True,
    )


@pytest.fixture
def user_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture
def make_service(
    configuration: Configuration, user_store: FakeUserStore
) -> Callable[..., tuple[RegisterService, FakeTransport]]:
    """Return a factory building a RegisterService around a fake transport."""

    def _factory(
        result: TransportResult | None = None,
    ) -> tuple[RegisterService, FakeTransport]:
        transport = FakeTransport(result or TransportSuccess(body=b"rc=200"))
        service = RegisterService(
            FakeConfigurationService(configuration),
            user_store,
            transport=transport,
            device_info=StaticDeviceInfo(os_version_value="10.3", model_value="Z10"),
        )
        return service, transport

    return _factory
