# pushcollector/Device/device_info.py
"""Device OS version and hardware model lookups.

Both lookups are blocking and independent: each one reads the platform details
from scratch and returns an empty string when they cannot be retrieved. An
empty string means "unknown" and is sent to the push initiator as-is.
"""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

# Linux exposes the vendor product name here; other platforms fall back to the
# machine type reported by `platform`.
DMI_PRODUCT_NAME = Path("/sys/devices/virtual/dmi/id/product_name")


class PlatformDeviceInfo:
    """Read the identity of the host this client runs on."""

    def __init__(self, product_name_path: Path = DMI_PRODUCT_NAME) -> None:
        self._product_name_path = product_name_path

    def os_version(self) -> str:
        """Return the OS release, or ``""`` if it cannot be determined."""
        try:
            details = platform.uname()
        except OSError as err:
            _LOGGER.debug("Error retrieving device details: %s", err)
            return ""
        return details.release or ""

    def model(self) -> str:
        """Return the hardware model, or ``""`` if it cannot be determined."""
        try:
            if self._product_name_path.is_file():
                product = self._product_name_path.read_text(encoding="utf-8").strip()
                if product:
                    return product
            return platform.uname().machine or ""
        except OSError as err:
            _LOGGER.debug("Error retrieving device details: %s", err)
            return ""


@dataclass(frozen=True, slots=True)
class StaticDeviceInfo:
    """Fixed device identity, e.g. supplied on the command line."""

    os_version_value: str = ""
    model_value: str = ""

    def os_version(self) -> str:
        return self.os_version_value

    def model(self) -> str:
        return self.model_value
