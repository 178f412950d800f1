"""In-memory User Directory for local runs and tests."""

from typing import Iterable, Optional

from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.ports.repositories import UserDirectory


class InMemoryUserDirectory(UserDirectory):
    def __init__(self, users: Optional[Iterable[User]] = None):
        self._users = {u.id: u for u in users or []}

    def list_users(self) -> list[User]:
        return list(self._users.values())

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)
