# tests/test_subscribe_request.py
"""Unit tests for building the `/subscribe` request URL."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlsplit

import pytest

from pushcollector.Auth.user import User
from pushcollector.config import Configuration
from pushcollector.const import SUBSCRIBE_PARAMS
from pushcollector.PushInitiator.subscribe_request import (
    build_subscribe_params,
    build_subscribe_url,
    redact_url,
)


def _query(url: str) -> list[tuple[str, str]]:
    return parse_qsl(urlsplit(url).query, keep_blank_values=True)


def test_url_targets_subscribe_with_all_parameters(
    alice: User, configuration: Configuration
) -> None:
    url = build_subscribe_url(alice, "tok123", configuration, "10.3", "Z10")

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == "https://pi.example/subscribe"
    assert _query(url) == [
        ("appid", "app1"),
        ("address", "tok123"),
        ("osversion", "10.3"),
        ("model", "Z10"),
        ("username", "alice"),
        ("password", "secret"),
        ("type", "public"),
    ]


@pytest.mark.parametrize(("public", "expected"), [(True, "public"), (False, "bds")])
def test_type_follows_gateway_flag(alice: User, public: bool, expected: str) -> None:
    config = Configuration("https://pi.example", "app1", public)

    params = dict(build_subscribe_params(alice, "tok", config, "", ""))

    assert params["type"] == expected


def test_values_are_passed_verbatim_and_encoded() -> None:
    user = User(user_id="bob smith", password="p&ss=w+rd/?")
    config = Configuration("https://pi.example/pi", "", False)

    url = build_subscribe_url(user, "", config, "", "")

    assert url.startswith("https://pi.example/pi/subscribe?")
    assert "bob%20smith" in url
    assert dict(_query(url)) == {
        "appid": "",
        "address": "",
        "osversion": "",
        "model": "",
        "username": "bob smith",
        "password": "p&ss=w+rd/?",
        "type": "bds",
    }


def test_empty_base_url_is_not_validated(alice: User) -> None:
    url = build_subscribe_url(alice, "tok", Configuration(), "1", "m")

    assert url.startswith("/subscribe?appid=&address=tok")


def test_redact_url_hides_password_and_token(alice: User, configuration: Configuration) -> None:
    url = build_subscribe_url(alice, "token-abcdef123456", configuration, "10.3", "Z10")

    redacted = redact_url(url)

    assert "secret" not in redacted
    assert "token-abcdef123456" not in redacted
    assert "3456" in redacted
    assert "username=alice" in redacted


def test_every_parameter_present_even_when_empty() -> None:
    params = build_subscribe_params(User("", ""), "", Configuration(), "", "")

    assert tuple(key for key, _ in params) == SUBSCRIBE_PARAMS
    assert [value for _, value in params] == ["", "", "", "", "", "", "bds"]
