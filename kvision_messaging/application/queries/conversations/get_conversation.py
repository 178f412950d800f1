"""
GetConversation Query - one conversation as the viewer sees it.

Used when a conversation is opened; the presentation layer follows up with
MarkConversationReadCommand.
"""

from dataclasses import dataclass

from kvision_messaging.application.common.interfaces import Query, QueryHandler
from kvision_messaging.application.queries.conversations.views import (
    ConversationView,
    build_conversation_views,
)
from kvision_messaging.application.services.conversation_synchronizer import (
    ConversationSynchronizer,
)
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import EntityNotFoundError
from kvision_messaging.domain.ports.repositories import UserDirectory
from kvision_messaging.domain.value_objects.conversation_id import ConversationId


@dataclass(frozen=True)
class GetConversationQuery(Query[ConversationView]):
    viewer: User
    conversation_id: ConversationId


class GetConversationHandler(QueryHandler[ConversationView]):
    def __init__(
        self, synchronizer: ConversationSynchronizer, user_directory: UserDirectory
    ):
        self._synchronizer = synchronizer
        self._user_directory = user_directory

    async def execute(self, query: GetConversationQuery) -> ConversationView:
        await self._synchronizer.ensure_synced()
        conversation = self._synchronizer.get(query.conversation_id)
        views = (
            build_conversation_views(
                [conversation], query.viewer, self._user_directory.list_users()
            )
            if conversation
            else []
        )
        if not views:
            # Not visible to this viewer is reported the same as missing
            raise EntityNotFoundError(
                f"Conversation {query.conversation_id.value} not found"
            )
        return views[0]
