# pushcollector/Device/__init__.py
"""Device identity reported to the push initiator."""

from .device_info import PlatformDeviceInfo, StaticDeviceInfo

__all__ = ["PlatformDeviceInfo", "StaticDeviceInfo"]
