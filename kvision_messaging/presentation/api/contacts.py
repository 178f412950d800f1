"""Contacts API Router - people the caller can start a new conversation with."""

from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from kvision_messaging.application.dto import ParticipantDTO
from kvision_messaging.application.queries.conversations import (
    ListContactsHandler,
    ListContactsQuery,
)
from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import ConversationStoreError
from kvision_messaging.presentation.dependencies.auth import get_current_user


# ==================== RESPONSE MODELS ====================
class ListContactsResponse(BaseModel):
    contacts: list[ParticipantDTO]


# ==================== ROUTERS ====================
router = APIRouter(prefix="/contacts", tags=["contacts"])


# ==================== ENDPOINTS ====================
@router.get("", response_model=ListContactsResponse)
@inject
async def list_contacts(
    handler: FromDishka[ListContactsHandler],
    search: Optional[str] = Query(
        None, max_length=Config.CONVERSATION_SEARCH_MAX_LENGTH
    ),
    current_user: User = Depends(get_current_user),
):
    try:
        users = await handler.execute(ListContactsQuery(viewer=current_user, search=search))
    except ConversationStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return ListContactsResponse(contacts=[ParticipantDTO.from_entity(u) for u in users])
