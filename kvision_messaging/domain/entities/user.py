"""
User Entity - a directory entry (owned by the auth/profile system, referenced here).
"""

from dataclasses import dataclass
from enum import Enum

from kvision_messaging.domain.exceptions.validation_error import DomainValidationError


class UserRole(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    role: UserRole

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise DomainValidationError("User ID cannot be empty")
        if not isinstance(self.role, UserRole):
            try:
                object.__setattr__(self, "role", UserRole(self.role))
            except ValueError:
                valid_roles = [r.value for r in UserRole]
                raise DomainValidationError(
                    f"Invalid role: {self.role}. Must be one of {valid_roles}."
                )

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
