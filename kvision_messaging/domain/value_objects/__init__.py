"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value)
- Is immutable (frozen dataclass or enum)
- Validates itself on creation
"""

from kvision_messaging.domain.value_objects.conversation_id import (
    CONVERSATION_ID_SEPARATOR,
    ConversationId,
    conversation_id_for,
)
from kvision_messaging.domain.value_objects.message_id import MessageId
from kvision_messaging.domain.value_objects.message_status import MessageStatus
from kvision_messaging.domain.value_objects.message_content import (
    FileContent,
    MessageContent,
    TextContent,
    UploadedFile,
)

__all__ = [
    "CONVERSATION_ID_SEPARATOR",
    "ConversationId",
    "conversation_id_for",
    "MessageId",
    "MessageStatus",
    "FileContent",
    "MessageContent",
    "TextContent",
    "UploadedFile",
]
