"""Conversation DTOs for API request/response."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from kvision_messaging.application.dto.message import MessageDTO
from kvision_messaging.application.queries.conversations.views import ConversationView
from kvision_messaging.domain.entities.user import User


class ParticipantDTO(BaseModel):
    id: str
    name: str
    role: str

    @classmethod
    def from_entity(cls, user: User) -> ParticipantDTO:
        return cls(id=user.id, name=user.name, role=user.role.value)


class ConversationSummaryDTO(BaseModel):
    """One row of the conversation list."""

    id: str
    other_user: ParticipantDTO
    unread_count: int
    last_message_preview: str
    last_activity: Optional[str] = None

    @classmethod
    def from_view(cls, view: ConversationView) -> ConversationSummaryDTO:
        return cls(
            id=view.id,
            other_user=ParticipantDTO.from_entity(view.other_user),
            unread_count=view.unread_count,
            last_message_preview=view.last_message_preview,
            last_activity=view.last_activity(),
        )


class ConversationDTO(ConversationSummaryDTO):
    """An opened conversation, with its ordered messages."""

    messages: list[MessageDTO]

    @classmethod
    def from_view(cls, view: ConversationView) -> ConversationDTO:
        summary = ConversationSummaryDTO.from_view(view)
        return cls(
            **summary.model_dump(exclude={"other_user"}),
            other_user=summary.other_user,
            messages=[MessageDTO.from_entity(m) for m in view.messages],
        )
