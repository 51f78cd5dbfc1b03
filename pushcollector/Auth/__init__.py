# pushcollector/Auth/__init__.py
"""User identity and its local persistence."""

from .user import User
from .user_store import UserStore

__all__ = ["User", "UserStore"]
