"""
Conversation Entity - the stored record of one two-party exchange.

One record exists per unordered pair of participant ids; its id is derived
from the pair (see conversation_id_for) and the participants never change.
The whole message list is written back on every mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from kvision_messaging.domain.entities.message import Message
from kvision_messaging.domain.exceptions.validation_error import DomainValidationError
from kvision_messaging.domain.value_objects.conversation_id import (
    ConversationId,
    conversation_id_for,
)
from kvision_messaging.domain.value_objects.message_id import MessageId
from kvision_messaging.domain.value_objects.message_status import MessageStatus


@dataclass
class Conversation:
    id: ConversationId
    participants: tuple[str, str]
    messages: list[Message] = field(default_factory=list)

    def __post_init__(self):
        if len(self.participants) != 2 or self.participants[0] == self.participants[1]:
            raise DomainValidationError(
                f"Conversation needs two distinct participants: {self.participants}"
            )
        self.participants = tuple(self.participants)

    @classmethod
    def start(cls, first_id: str, second_id: str) -> Conversation:
        return cls(
            id=conversation_id_for(first_id, second_id),
            participants=(first_id, second_id),
        )

    def includes(self, participant_id: str) -> bool:
        return participant_id in self.participants

    def other_participant(self, participant_id: str) -> Optional[str]:
        if not self.includes(participant_id):
            return None
        return next(p for p in self.participants if p != participant_id)

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def append(self, message: Message) -> None:
        if {message.sender_id, message.receiver_id} != set(self.participants):
            raise DomainValidationError(
                f"Message {message.id} does not belong to conversation {self.id}"
            )
        self.messages.append(message)

    def remove_message(self, message_id: MessageId) -> bool:
        remaining = [m for m in self.messages if m.id != message_id]
        removed = len(remaining) != len(self.messages)
        self.messages = remaining
        return removed

    def unread_count_for(self, identity: str) -> int:
        return sum(1 for m in self.messages if m.is_unread_for(identity))

    def mark_read_for(self, identity: str) -> int:
        """Mark every message addressed to identity as read. Returns how many changed."""
        changed = 0
        for message in self.messages:
            if message.receiver_id == identity and message.advance_status(
                MessageStatus.READ
            ):
                changed += 1
        return changed

    def payload_size(self) -> int:
        """Approximate stored size: text lengths plus inline attachment references."""
        total = 0
        for message in self.messages:
            content = message.content
            total += len(content.value if content.type == "text" else content.value.data_url)
        return total

    def copy(self) -> Conversation:
        return Conversation(
            id=self.id,
            participants=self.participants,
            messages=[m.copy() for m in self.messages],
        )
