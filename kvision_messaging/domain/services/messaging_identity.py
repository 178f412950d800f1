"""
Messaging identity - which participant id a user reads and writes as.

All admin operators share one inbox: the virtual participant
ADMIN_VIRTUAL_USER_ID. It lives in the same id space as real users but is
never stored as a user record; directory listings get a synthetic entry for
display only.
"""

from kvision_messaging.domain.entities.user import User, UserRole

ADMIN_VIRTUAL_USER_ID = "kvision_admin_inbox"
ADMIN_DISPLAY_NAME = "KVISION Admin"


def messaging_identity_for(user: User) -> str:
    if user.role is UserRole.ADMIN:
        return ADMIN_VIRTUAL_USER_ID
    return user.id


def admin_directory_entry() -> User:
    return User(id=ADMIN_VIRTUAL_USER_ID, name=ADMIN_DISPLAY_NAME, role=UserRole.ADMIN)
