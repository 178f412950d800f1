"""
MarkConversationRead Command - mark everything addressed to the reader as read.

Runs whenever a conversation is opened. The reader's messaging identity is
the shared admin inbox for admins, their own id otherwise. Messages addressed
to the other party are left alone. Idempotent: when nothing is unread no
write is issued, so a second call is a no-op.
"""

from dataclasses import dataclass

from kvision_messaging.application.common.interfaces import Command, CommandHandler
from kvision_messaging.application.services.conversation_synchronizer import (
    ConversationSynchronizer,
)
from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import AccessDeniedError
from kvision_messaging.domain.services.messaging_identity import messaging_identity_for
from kvision_messaging.domain.value_objects.conversation_id import ConversationId


@dataclass(frozen=True)
class MarkConversationReadCommand(Command[int]):
    conversation_id: ConversationId
    reader: User


class MarkConversationReadHandler(CommandHandler[int]):
    def __init__(self, synchronizer: ConversationSynchronizer):
        self._synchronizer = synchronizer

    async def execute(self, command: MarkConversationReadCommand) -> int:
        """Returns the number of messages that changed to read."""
        identity = messaging_identity_for(command.reader)

        await self._synchronizer.ensure_synced()
        conversation = self._synchronizer.get(command.conversation_id)
        if not conversation:
            return 0
        if not conversation.includes(identity):
            raise AccessDeniedError("User is not a participant of this conversation.")
        if not conversation.unread_count_for(identity):
            return 0

        def mark(draft: Conversation) -> int:
            return draft.mark_read_for(identity)

        return await self._synchronizer.update(command.conversation_id, mark)
