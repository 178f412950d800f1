"""Conversation-related queries."""

from kvision_messaging.application.queries.conversations.views import (
    ConversationView,
    build_conversation_views,
)
from kvision_messaging.application.queries.conversations.list_conversations import (
    ListConversationsHandler,
    ListConversationsQuery,
)
from kvision_messaging.application.queries.conversations.get_conversation import (
    GetConversationHandler,
    GetConversationQuery,
)
from kvision_messaging.application.queries.conversations.list_contacts import (
    ListContactsHandler,
    ListContactsQuery,
)

__all__ = [
    "ConversationView",
    "build_conversation_views",
    "ListConversationsHandler",
    "ListConversationsQuery",
    "GetConversationHandler",
    "GetConversationQuery",
    "ListContactsHandler",
    "ListContactsQuery",
]
