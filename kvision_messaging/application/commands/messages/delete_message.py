"""
DeleteMessage Command - remove one message from a conversation.

A true removal: the remaining list is written back as a full replacement and
no tombstone is kept. Unknown message ids are a no-op (nothing is written).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from kvision_messaging.application.common.interfaces import Command, CommandHandler
from kvision_messaging.application.services.conversation_synchronizer import (
    ConversationSynchronizer,
)
from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import AccessDeniedError, EntityNotFoundError
from kvision_messaging.domain.services.messaging_identity import messaging_identity_for
from kvision_messaging.domain.value_objects.conversation_id import ConversationId
from kvision_messaging.domain.value_objects.message_id import MessageId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteMessageCommand(Command[bool]):
    conversation_id: ConversationId
    message_id: MessageId
    requester: Optional[User] = None


class DeleteMessageHandler(CommandHandler[bool]):
    def __init__(self, synchronizer: ConversationSynchronizer):
        self._synchronizer = synchronizer

    async def execute(self, command: DeleteMessageCommand) -> bool:
        await self._synchronizer.ensure_synced()
        conversation = self._synchronizer.get(command.conversation_id)
        if not conversation:
            raise EntityNotFoundError(
                f"Conversation {command.conversation_id.value} not found."
            )
        if command.requester and not conversation.includes(
            messaging_identity_for(command.requester)
        ):
            raise AccessDeniedError("User is not a participant of this conversation.")

        def remove(draft: Conversation) -> bool:
            return draft.remove_message(command.message_id)

        removed = await self._synchronizer.update(command.conversation_id, remove)
        if removed:
            logger.info(
                "Deleted message %s from %s",
                command.message_id,
                command.conversation_id,
            )
        return removed
