"""
Conversations API Router - the caller's inbox.

Flow:
  HTTP Request → Router → Query/Command → Handler → Synchronizer → Store
                                   ↓
  HTTP Response ← Router ← DTO ←

All views are computed for the caller's messaging identity, so every admin
sees the shared admin inbox.
"""

from logging import getLogger
from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from kvision_messaging.application.commands.conversations import (
    MarkConversationReadCommand,
    MarkConversationReadHandler,
)
from kvision_messaging.application.commands.messages import (
    DeleteMessageCommand,
    DeleteMessageHandler,
)
from kvision_messaging.application.dto import ConversationDTO, ConversationSummaryDTO
from kvision_messaging.application.queries.conversations import (
    GetConversationHandler,
    GetConversationQuery,
    ListConversationsHandler,
    ListConversationsQuery,
)
from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import (
    AccessDeniedError,
    ConversationStoreError,
    DomainValidationError,
    EntityNotFoundError,
)
from kvision_messaging.domain.value_objects.conversation_id import ConversationId
from kvision_messaging.domain.value_objects.message_id import MessageId
from kvision_messaging.presentation.dependencies.auth import get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class ListConversationsResponse(BaseModel):
    conversations: list[ConversationSummaryDTO]


class MarkReadResponse(BaseModel):
    """Number of messages that changed to read (0 when nothing was unread)."""

    marked: int


class DeleteMessageResponse(BaseModel):
    success: bool


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["conversations"])


# ==================== ENDPOINTS ====================


@router.get(
    "",
    response_model=ListConversationsResponse,
    status_code=status.HTTP_200_OK,
)
@inject
async def list_conversations(
    handler: FromDishka[ListConversationsHandler],
    search: Optional[str] = Query(
        None, max_length=Config.CONVERSATION_SEARCH_MAX_LENGTH
    ),
    current_user: User = Depends(get_current_user),
):
    """
    List the caller's conversations, newest activity first.

    Response:
    {
        "conversations": [
            {"id": "kvision_admin_inbox--stu-1",
             "other_user": {"id": "stu-1", "name": "...", "role": "student"},
             "unread_count": 2,
             "last_message_preview": "File attachment",
             "last_activity": "5 minutes ago"},
            ...
        ]
    }
    """
    try:
        views = await handler.execute(
            ListConversationsQuery(viewer=current_user, search=search)
        )
    except ConversationStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return ListConversationsResponse(
        conversations=[ConversationSummaryDTO.from_view(v) for v in views]
    )


@router.get(
    "/{conversation_id}",
    response_model=ConversationDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def get_conversation(
    conversation_id: str,
    handler: FromDishka[GetConversationHandler],
    current_user: User = Depends(get_current_user),
):
    """Open one conversation with its ordered messages."""
    try:
        view = await handler.execute(
            GetConversationQuery(
                viewer=current_user,
                conversation_id=ConversationId(conversation_id),
            )
        )
    except DomainValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ConversationStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return ConversationDTO.from_view(view)


@router.post(
    "/{conversation_id}/read",
    response_model=MarkReadResponse,
    status_code=status.HTTP_200_OK,
)
@inject
async def mark_conversation_read(
    conversation_id: str,
    handler: FromDishka[MarkConversationReadHandler],
    current_user: User = Depends(get_current_user),
):
    """Mark every message addressed to the caller as read. Safe to repeat."""
    try:
        marked = await handler.execute(
            MarkConversationReadCommand(
                conversation_id=ConversationId(conversation_id),
                reader=current_user,
            )
        )
    except DomainValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ConversationStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return MarkReadResponse(marked=marked)


@router.delete(
    "/{conversation_id}/messages/{message_id}",
    response_model=DeleteMessageResponse,
    status_code=status.HTTP_200_OK,
)
@inject
async def delete_message(
    conversation_id: str,
    message_id: str,
    handler: FromDishka[DeleteMessageHandler],
    current_user: User = Depends(get_current_user),
):
    """
    Delete one message for both participants.

    Response: {"success": true} when removed, {"success": false} when the
    message id was not in the conversation.
    """
    try:
        removed = await handler.execute(
            DeleteMessageCommand(
                conversation_id=ConversationId(conversation_id),
                message_id=MessageId(message_id),
                requester=current_user,
            )
        )
    except DomainValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ConversationStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return DeleteMessageResponse(success=removed)
