"""
SendMessage Command - append a text or file message to a two-party conversation.

Handler:
1. Validate ids and content (attachment policy) - nothing is written on failure
2. Derive the conversation id from the two participant ids
3. Build the Message (status "sent", current timestamp, local id)
4. Append to the existing record, or start a new one on first contact
5. Write the whole record through the synchronizer (optimistic + upsert)

The conversation is created lazily here; there is no "start conversation"
operation.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from kvision_messaging.application.common.interfaces import Command, CommandHandler
from kvision_messaging.application.services.attachment_policy import AttachmentPolicy
from kvision_messaging.application.services.conversation_synchronizer import (
    ConversationSynchronizer,
)
from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.entities.message import Message
from kvision_messaging.domain.exceptions import DomainValidationError
from kvision_messaging.domain.value_objects.conversation_id import conversation_id_for
from kvision_messaging.domain.value_objects.message_content import (
    FileContent,
    MessageContent,
    TextContent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendMessageCommand(Command[Message]):
    sender_id: str
    receiver_id: str
    content: MessageContent


class SendMessageHandler(CommandHandler[Message]):
    def __init__(
        self,
        synchronizer: ConversationSynchronizer,
        attachment_policy: AttachmentPolicy,
        max_record_bytes: Optional[int] = None,
    ):
        self._synchronizer = synchronizer
        self._attachment_policy = attachment_policy
        if max_record_bytes is None:
            max_record_bytes = int(Config.MAX_CONVERSATION_RECORD_MB * 1024 * 1024)
        self._max_record_bytes = max_record_bytes

    def validate_content(self, content: MessageContent) -> None:
        if isinstance(content, FileContent):
            self._attachment_policy.validate(content.value)
        elif not isinstance(content, TextContent):
            raise DomainValidationError(f"Unsupported message content: {content!r}")

    async def execute(self, command: SendMessageCommand) -> Message:
        sender_id = (command.sender_id or "").strip()
        receiver_id = (command.receiver_id or "").strip()
        if not sender_id or not receiver_id:
            raise DomainValidationError("Sender and receiver IDs cannot be empty.")
        if sender_id == receiver_id:
            raise DomainValidationError("Cannot send a message to yourself.")
        self.validate_content(command.content)

        conversation_id = conversation_id_for(sender_id, receiver_id)
        message = Message.create(sender_id, receiver_id, command.content)

        def append(draft: Conversation) -> Message:
            draft.append(message)
            if draft.payload_size() > self._max_record_bytes:
                raise DomainValidationError(
                    "Conversation is full: attachments exceed the stored record limit."
                )
            return message

        await self._synchronizer.update(
            conversation_id,
            append,
            create=lambda: Conversation.start(sender_id, receiver_id),
        )
        logger.info(
            "Sent %s message %s in %s", command.content.type, message.id, conversation_id
        )
        return message
