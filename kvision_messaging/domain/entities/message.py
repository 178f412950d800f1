"""
Message Entity - a single message inside a two-party conversation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone

from kvision_messaging.domain.exceptions.validation_error import DomainValidationError
from kvision_messaging.domain.value_objects.message_content import MessageContent
from kvision_messaging.domain.value_objects.message_id import MessageId
from kvision_messaging.domain.value_objects.message_status import MessageStatus


@dataclass
class Message:
    id: MessageId
    sender_id: str
    receiver_id: str
    timestamp: datetime
    content: MessageContent
    status: MessageStatus = MessageStatus.SENT

    def __post_init__(self):
        if not self.sender_id or not self.receiver_id:
            raise DomainValidationError("Sender and receiver IDs cannot be empty")
        if self.sender_id == self.receiver_id:
            raise DomainValidationError("Sender and receiver must be different")

    @classmethod
    def create(
        cls, sender_id: str, receiver_id: str, content: MessageContent
    ) -> Message:
        """Factory method to create a new Message with a generated ID and timestamp."""
        return cls(
            id=MessageId.generate(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            timestamp=datetime.now(timezone.utc),
            content=content,
            status=MessageStatus.SENT,
        )

    def is_unread_for(self, identity: str) -> bool:
        return self.receiver_id == identity and self.status is not MessageStatus.READ

    def advance_status(self, target: MessageStatus) -> bool:
        """Move status forward to target. Returns False when nothing changed."""
        new_status = self.status.advanced_to(target)
        if new_status is self.status:
            return False
        self.status = new_status
        return True

    def copy(self) -> Message:
        return replace(self)
