"""
BroadcastMessage Command - one admin message fanned out to many users.

Each recipient gets an ordinary two-party conversation with the virtual
admin identity, sent one after another. Not atomic: a failed recipient is
logged and skipped, and only the number of successful sends is reported.
Admin accounts (and the virtual identity itself) are never recipients.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from kvision_messaging.application.commands.messages.send_message import (
    SendMessageCommand,
    SendMessageHandler,
)
from kvision_messaging.application.common.interfaces import Command, CommandHandler
from kvision_messaging.domain.entities.user import User, UserRole
from kvision_messaging.domain.exceptions import (
    ConversationStoreError,
    DomainValidationError,
)
from kvision_messaging.domain.ports.repositories import UserDirectory
from kvision_messaging.domain.services.messaging_identity import ADMIN_VIRTUAL_USER_ID
from kvision_messaging.domain.value_objects.message_content import MessageContent

logger = logging.getLogger(__name__)


class BroadcastTarget(str, Enum):
    ALL = "all"
    TEACHER = "teacher"
    STUDENT = "student"

    def matches(self, user: User) -> bool:
        return self is BroadcastTarget.ALL or user.role.value == self.value


@dataclass(frozen=True)
class BroadcastMessageCommand(Command[int]):
    target: BroadcastTarget
    content: MessageContent
    sender_id: str = ADMIN_VIRTUAL_USER_ID


class BroadcastMessageHandler(CommandHandler[int]):
    def __init__(
        self, user_directory: UserDirectory, send_message_handler: SendMessageHandler
    ):
        self._user_directory = user_directory
        self._send_message_handler = send_message_handler

    def recipients(self, command: BroadcastMessageCommand) -> list[User]:
        return [
            u
            for u in self._user_directory.list_users()
            if u.role is not UserRole.ADMIN
            and u.id not in (ADMIN_VIRTUAL_USER_ID, command.sender_id)
            and command.target.matches(u)
        ]

    async def execute(self, command: BroadcastMessageCommand) -> int:
        """Returns how many recipients received the message."""
        # Reject bad content once, before anyone receives anything
        self._send_message_handler.validate_content(command.content)

        sent = 0
        recipients = self.recipients(command)
        for recipient in recipients:
            try:
                await self._send_message_handler.execute(
                    SendMessageCommand(
                        sender_id=command.sender_id,
                        receiver_id=recipient.id,
                        content=command.content,
                    )
                )
                sent += 1
            except (ConversationStoreError, DomainValidationError) as e:
                logger.warning("Broadcast to %s failed: %s", recipient.id, e)

        logger.info(
            "Broadcasted message to %d of %d users (target=%s)",
            sent,
            len(recipients),
            command.target.value,
        )
        return sent
