"""
User Directory Port - read-only view of platform users for name resolution.

Lookups are synchronous: the directory is loaded up front, messaging never
waits on it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from kvision_messaging.domain.entities.user import User


class UserDirectory(ABC):
    @abstractmethod
    def list_users(self) -> list[User]: ...

    def get(self, user_id: str) -> Optional[User]:
        return next((u for u in self.list_users() if u.id == user_id), None)
