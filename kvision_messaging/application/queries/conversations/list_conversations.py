"""List Conversations Query - the viewer's conversation list with unread counts."""

from dataclasses import dataclass
from typing import Optional

from kvision_messaging.application.common.interfaces import Query, QueryHandler
from kvision_messaging.application.queries.conversations.views import (
    ConversationView,
    build_conversation_views,
    matches_search,
)
from kvision_messaging.application.services.conversation_synchronizer import (
    ConversationSynchronizer,
)
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.ports.repositories import UserDirectory


@dataclass(frozen=True)
class ListConversationsQuery(Query[list[ConversationView]]):
    viewer: User
    search: Optional[str] = None


class ListConversationsHandler(QueryHandler[list[ConversationView]]):
    def __init__(
        self, synchronizer: ConversationSynchronizer, user_directory: UserDirectory
    ):
        self._synchronizer = synchronizer
        self._user_directory = user_directory

    async def execute(self, query: ListConversationsQuery) -> list[ConversationView]:
        await self._synchronizer.ensure_synced()
        views = build_conversation_views(
            self._synchronizer.conversations(),
            query.viewer,
            self._user_directory.list_users(),
        )
        return [v for v in views if matches_search(v.other_user.name, query.search)]
