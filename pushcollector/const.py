# pushcollector/const.py
"""Constants for the push initiator registration client."""

from __future__ import annotations

from typing import Final

DOMAIN: Final = "pushcollector"

# Storage
CONFIG_DIR_ENV: Final = "PUSHCOLLECTOR_CONFIG_DIR"
CONFIG_FILE: Final = "pushcollector.json"
USER_FILE: Final = "user.json"

# Stored configuration keys
CONF_PUSH_INITIATOR_URL: Final = "push_initiator_url"
CONF_PROVIDER_APPLICATION_ID: Final = "provider_application_id"
CONF_USING_PUBLIC_PPG: Final = "using_public_push_proxy_gateway"

# Stored user keys
CONF_USER_ID: Final = "user_id"
CONF_PASSWORD: Final = "password"

# Push initiator subscription endpoint
SUBSCRIBE_PATH: Final = "/subscribe"

PARAM_APP_ID: Final = "appid"
PARAM_ADDRESS: Final = "address"
PARAM_OS_VERSION: Final = "osversion"
PARAM_MODEL: Final = "model"
PARAM_USERNAME: Final = "username"
PARAM_PASSWORD: Final = "password"
PARAM_TYPE: Final = "type"

SUBSCRIBE_PARAMS: Final = (
    PARAM_APP_ID,
    PARAM_ADDRESS,
    PARAM_OS_VERSION,
    PARAM_MODEL,
    PARAM_USERNAME,
    PARAM_PASSWORD,
    PARAM_TYPE,
)

# Push proxy gateway flavours accepted by the push initiator
TYPE_PUBLIC: Final = "public"
TYPE_BDS: Final = "bds"

# Response vocabulary
RESPONSE_SUCCESS: Final = "rc=200"
UNKNOWN_RESPONSE_CODE: Final = -1

# Transport
CLIENT_TIMEOUT_S: Final = 60.0
