# pushcollector/PushInitiator/subscribe_request.py
"""Build the push initiator `/subscribe` request URL."""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from ..Auth.user import User
from ..config import Configuration
from ..const import (
    PARAM_ADDRESS,
    PARAM_APP_ID,
    PARAM_MODEL,
    PARAM_OS_VERSION,
    PARAM_PASSWORD,
    PARAM_TYPE,
    PARAM_USERNAME,
    SUBSCRIBE_PATH,
    TYPE_BDS,
    TYPE_PUBLIC,
)

_SENSITIVE_PARAMS = frozenset({PARAM_PASSWORD, PARAM_ADDRESS})


def subscription_type(config: Configuration) -> str:
    """Return the `type` parameter for the configured push proxy gateway."""
    return TYPE_PUBLIC if config.using_public_push_proxy_gateway else TYPE_BDS


def build_subscribe_params(
    user: User,
    token: str,
    config: Configuration,
    device_os_version: str,
    device_model: str,
) -> list[tuple[str, str]]:
    """Return the ordered query parameters of a subscribe request.

    Values are passed through verbatim; the push initiator is the one that
    validates them and answers with an `rc=` error code.
    """
    return [
        (PARAM_APP_ID, config.provider_application_id),
        (PARAM_ADDRESS, token),
        (PARAM_OS_VERSION, device_os_version),
        (PARAM_MODEL, device_model),
        (PARAM_USERNAME, user.user_id),
        (PARAM_PASSWORD, user.password),
        (PARAM_TYPE, subscription_type(config)),
    ]


def build_subscribe_url(
    user: User,
    token: str,
    config: Configuration,
    device_os_version: str,
    device_model: str,
) -> str:
    """Return `<push_initiator_url>/subscribe?<params>` for one registration."""
    query = urlencode(
        build_subscribe_params(user, token, config, device_os_version, device_model),
        quote_via=quote,
    )
    return f"{config.push_initiator_url}{SUBSCRIBE_PATH}?{query}"


def redact_url(url: str) -> str:
    """Return ``url`` with credential and token query values redacted for logging."""
    try:
        parts = urlsplit(url)
        redacted: list[tuple[str, str]] = []
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            if key.lower() in _SENSITIVE_PARAMS and value:
                red_value = "****"
                if key.lower() != PARAM_PASSWORD and len(value) > 6:
                    red_value = f"••••{value[-4:]}"
                redacted.append((key, red_value))
            else:
                redacted.append((key, value))
        return urlunsplit(
            (
                parts.scheme,
                parts.netloc,
                parts.path,
                urlencode(redacted, quote_via=quote),
                parts.fragment,
            )
        )
    except ValueError:
        return "<unparseable url>"
