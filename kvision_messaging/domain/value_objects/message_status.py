"""
MessageStatus Value Object - delivery state of a message.

Status only moves forward: sent -> delivered -> read.
"""

from __future__ import annotations

from enum import Enum


class MessageStatus(str, Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def advanced_to(self, target: MessageStatus) -> MessageStatus:
        """Return the later of the two statuses; never downgrades."""
        return target if target.rank > self.rank else self


_RANKS = {
    MessageStatus.SENT: 0,
    MessageStatus.DELIVERED: 1,
    MessageStatus.READ: 2,
}
