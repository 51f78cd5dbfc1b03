# pushcollector/config.py
"""Push initiator configuration.

The configuration is a small JSON document validated with a voluptuous schema.
`ConfigurationService.configuration()` reads it from disk on every call so each
registration attempt works from a fresh, read-only snapshot.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import voluptuous as vol

from .const import (
    CONF_PROVIDER_APPLICATION_ID,
    CONF_PUSH_INITIATOR_URL,
    CONF_USING_PUBLIC_PPG,
    CONFIG_DIR_ENV,
    CONFIG_FILE,
    DOMAIN,
)
from .exceptions import InvalidConfigurationError

_LOGGER = logging.getLogger(__name__)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_PUSH_INITIATOR_URL, default=""): str,
        vol.Optional(CONF_PROVIDER_APPLICATION_ID, default=""): str,
        vol.Optional(CONF_USING_PUBLIC_PPG, default=False): bool,
    },
    extra=vol.REMOVE_EXTRA,
)

_config_lock = threading.RLock()


def get_config_dir() -> Path:
    """Return the per-user directory holding configuration and user files."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA", str(Path.home()))) / DOMAIN
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / DOMAIN
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / DOMAIN
    return Path.home() / ".config" / DOMAIN


@dataclass(frozen=True, slots=True)
class Configuration:
    """Read-only snapshot of the push initiator settings.

    Attributes:
        push_initiator_url: Base URL of the push initiator (without `/subscribe`).
        provider_application_id: Application ID registered with the push service.
        using_public_push_proxy_gateway: Selects the `public` subscription type
            when true, `bds` otherwise.
    """

    push_initiator_url: str = ""
    provider_application_id: str = ""
    using_public_push_proxy_gateway: bool = False

    def as_dict(self) -> dict[str, Any]:
        """Return the storage representation."""
        return {
            CONF_PUSH_INITIATOR_URL: self.push_initiator_url,
            CONF_PROVIDER_APPLICATION_ID: self.provider_application_id,
            CONF_USING_PUBLIC_PPG: self.using_public_push_proxy_gateway,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Configuration:
        """Validate ``data`` against :data:`CONFIG_SCHEMA` and build a snapshot.

        Raises:
            InvalidConfigurationError: If the mapping fails validation.
        """
        try:
            valid = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as err:
            raise InvalidConfigurationError(f"Invalid configuration: {err}") from err
        return cls(
            push_initiator_url=valid[CONF_PUSH_INITIATOR_URL],
            provider_application_id=valid[CONF_PROVIDER_APPLICATION_ID],
            using_public_push_proxy_gateway=valid[CONF_USING_PUBLIC_PPG],
        )


class ConfigurationService:
    """Load and store the push initiator :class:`Configuration`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or get_config_dir() / CONFIG_FILE

    @property
    def path(self) -> Path:
        """Location of the backing JSON file."""
        return self._path

    def has_configuration(self) -> bool:
        """Return True once a configuration file has been written."""
        return self._path.exists()

    def configuration(self) -> Configuration:
        """Return a fresh snapshot, falling back to defaults if nothing is stored.

        Raises:
            InvalidConfigurationError: If the stored file is unreadable or invalid.
        """
        with _config_lock:
            try:
                if not self._path.exists():
                    _LOGGER.debug("No configuration at %s; using defaults", self._path)
                    return Configuration()
                data = json.loads(self._path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as err:
                raise InvalidConfigurationError(
                    f"Unable to read configuration {self._path}: {err}"
                ) from err

        if not isinstance(data, dict):
            raise InvalidConfigurationError(
                f"Configuration {self._path} must contain a JSON object"
            )
        return Configuration.from_mapping(data)

    def save(self, configuration: Configuration) -> None:
        """Persist ``configuration``, replacing the stored file atomically."""
        data = CONFIG_SCHEMA(configuration.as_dict())
        with _config_lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self._path.with_suffix(".tmp")
                tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
                tmp_path.replace(self._path)
            except OSError as err:
                raise InvalidConfigurationError(
                    f"Unable to write configuration {self._path}: {err}"
                ) from err
        _LOGGER.debug("Configuration saved to %s", self._path)

    async def async_configuration(self) -> Configuration:
        """Async variant of :meth:`configuration` (runs in the default executor)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.configuration)

    async def async_save(self, configuration: Configuration) -> None:
        """Async variant of :meth:`save` (runs in the default executor)."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.save, configuration)
