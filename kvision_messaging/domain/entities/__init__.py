"""
ENTITIES - Business objects with identity

Pure Python dataclasses (no ORM, no Pydantic).
"""

from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.entities.message import Message
from kvision_messaging.domain.entities.user import User, UserRole

__all__ = [
    "Conversation",
    "Message",
    "User",
    "UserRole",
]
