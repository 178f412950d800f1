"""
Per-viewer derivation of the raw conversation snapshot.

For a viewer:
1. keep conversations that include the viewer's messaging identity
2. resolve the other participant against the directory (+ synthetic admin entry);
   conversations with an unknown other party are dropped
3. unread = messages addressed to the identity whose status is not "read"
4. newest last message first; conversations without messages go last
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.entities.message import Message
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.services.messaging_identity import (
    admin_directory_entry,
    messaging_identity_for,
)
from kvision_messaging.utils.time_ago import time_ago

NO_MESSAGES_PREVIEW = "No messages yet"


@dataclass
class ConversationView:
    conversation: Conversation
    other_user: User
    unread_count: int

    @property
    def id(self) -> str:
        return self.conversation.id.value

    @property
    def messages(self) -> list[Message]:
        return self.conversation.messages

    @property
    def last_message_preview(self) -> str:
        last = self.conversation.last_message
        return last.content.preview if last else NO_MESSAGES_PREVIEW

    def last_activity(self, now: Optional[datetime] = None) -> Optional[str]:
        last = self.conversation.last_message
        return time_ago(last.timestamp, now) if last else None


def _sort_key(view: ConversationView) -> tuple[int, float]:
    last = view.conversation.last_message
    if last is None:
        return (1, 0.0)
    timestamp = last.timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return (0, -timestamp.timestamp())


def build_conversation_views(
    conversations: Iterable[Conversation],
    viewer: User,
    users: Iterable[User],
) -> list[ConversationView]:
    identity = messaging_identity_for(viewer)
    directory = {u.id: u for u in users}
    admin_entry = admin_directory_entry()
    directory.setdefault(admin_entry.id, admin_entry)

    views = []
    for conversation in conversations:
        other_id = conversation.other_participant(identity)
        if other_id is None:
            continue
        other_user = directory.get(other_id)
        if other_user is None:
            continue
        views.append(
            ConversationView(
                conversation=conversation,
                other_user=other_user,
                unread_count=conversation.unread_count_for(identity),
            )
        )

    views.sort(key=_sort_key)
    return views


def matches_search(name: str, search: Optional[str]) -> bool:
    if not search:
        return True
    return search.strip().lower() in name.lower()
