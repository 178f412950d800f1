"""
List Contacts Query - people the viewer can start a new conversation with.

Students are offered teachers, teachers are offered students, admins every
non-admin user. Anyone the viewer already has a conversation with is left
out (they appear in the conversation list instead).
"""

from dataclasses import dataclass
from typing import Optional

from kvision_messaging.application.common.interfaces import Query, QueryHandler
from kvision_messaging.application.queries.conversations.views import (
    build_conversation_views,
    matches_search,
)
from kvision_messaging.application.services.conversation_synchronizer import (
    ConversationSynchronizer,
)
from kvision_messaging.domain.entities.user import User, UserRole
from kvision_messaging.domain.ports.repositories import UserDirectory

_CONTACT_ROLES = {
    UserRole.STUDENT: {UserRole.TEACHER},
    UserRole.TEACHER: {UserRole.STUDENT},
    UserRole.ADMIN: {UserRole.TEACHER, UserRole.STUDENT},
}


@dataclass(frozen=True)
class ListContactsQuery(Query[list[User]]):
    viewer: User
    search: Optional[str] = None


class ListContactsHandler(QueryHandler[list[User]]):
    def __init__(
        self, synchronizer: ConversationSynchronizer, user_directory: UserDirectory
    ):
        self._synchronizer = synchronizer
        self._user_directory = user_directory

    async def execute(self, query: ListContactsQuery) -> list[User]:
        await self._synchronizer.ensure_synced()
        users = self._user_directory.list_users()
        active_ids = {
            view.other_user.id
            for view in build_conversation_views(
                self._synchronizer.conversations(), query.viewer, users
            )
        }
        roles = _CONTACT_ROLES[query.viewer.role]
        return [
            u
            for u in users
            if u.role in roles
            and u.id != query.viewer.id
            and u.id not in active_ids
            and matches_search(u.name, query.search)
        ]
