"""
DTOs - Data Transfer Objects

- message.py      → MessageDTO, content DTOs
- conversation.py → ConversationDTO, ConversationSummaryDTO, ParticipantDTO

DTOs are for API input/output, entities are for business logic.
"""

from kvision_messaging.application.dto.message import (
    FileContentDTO,
    MessageContentDTO,
    MessageDTO,
    TextContentDTO,
    UploadedFileDTO,
)
from kvision_messaging.application.dto.conversation import (
    ConversationDTO,
    ConversationSummaryDTO,
    ParticipantDTO,
)

__all__ = [
    "FileContentDTO",
    "MessageContentDTO",
    "MessageDTO",
    "TextContentDTO",
    "UploadedFileDTO",
    "ConversationDTO",
    "ConversationSummaryDTO",
    "ParticipantDTO",
]
