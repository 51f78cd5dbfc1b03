# tests/helpers/__init__.py
"""Helper utilities for push collector tests."""

from __future__ import annotations

from .push import (
    FakeConfigurationService,
    FakeResponse,
    FakeSession,
    FakeTransport,
    FakeUserStore,
)

__all__ = [
    "FakeConfigurationService",
    "FakeResponse",
    "FakeSession",
    "FakeTransport",
    "FakeUserStore",
]
