# pushcollector/Auth/user_store.py
"""JSON-file persistence for the registered user.

The store keeps the last user that completed a successful push initiator
registration. Writes are serialized with a process-wide lock and async callers
go through the default executor so the event loop never blocks on file I/O.

Write failures are logged and swallowed: the registration core treats
persistence as fire-and-forget and never observes a storage error.
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from pathlib import Path

from ..config import get_config_dir
from ..const import USER_FILE
from .user import User

_LOGGER = logging.getLogger(__name__)

_write_lock = threading.RLock()


class UserStore:
    """Persist and load the registered :class:`User`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or get_config_dir() / USER_FILE

    @property
    def path(self) -> Path:
        """Location of the backing JSON file."""
        return self._path

    # --- sync API ------------------------------------------------------------
    def save(self, user: User) -> None:
        """Write ``user`` to disk, replacing any previous record."""
        with _write_lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self._path.with_suffix(".tmp")
                tmp_path.write_text(json.dumps(user.as_dict()), encoding="utf-8")
                tmp_path.replace(self._path)
            except OSError as err:
                _LOGGER.error("Failed to save user %s to %s: %s", user.user_id, self._path, err)
                return
        _LOGGER.debug("Saved user %s to %s", user.user_id, self._path)

    def load(self) -> User | None:
        """Return the stored user, or ``None`` if nothing usable is stored."""
        with _write_lock:
            if not self._path.exists():
                return None
            try:
                data = json.loads(self._path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as err:
                _LOGGER.warning("Ignoring unreadable user file %s: %s", self._path, err)
                return None

        if not isinstance(data, dict):
            return None
        try:
            return User.from_mapping(data)
        except KeyError as err:
            _LOGGER.warning("User file %s is missing key %s", self._path, err)
            return None

    def remove(self) -> None:
        """Delete the stored user if present."""
        with _write_lock:
            try:
                self._path.unlink(missing_ok=True)
            except OSError as err:
                _LOGGER.error("Failed to remove user file %s: %s", self._path, err)

    # --- async API -----------------------------------------------------------
    async def async_save(self, user: User) -> None:
        """Async variant of :meth:`save` (runs in the default executor)."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.save, user)

    async def async_load(self) -> User | None:
        """Async variant of :meth:`load` (runs in the default executor)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.load)
