"""
Messages API Router - send and broadcast.

POST /messages            → 201, the stored message
POST /messages/broadcast  → 200, {"sent": N} (admins only, rate limited)

The sender is always the caller's messaging identity; admins send as the
shared admin inbox.
"""

from logging import getLogger

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from kvision_messaging.application.commands.messages import (
    BroadcastMessageCommand,
    BroadcastMessageHandler,
    BroadcastTarget,
    SendMessageCommand,
    SendMessageHandler,
)
from kvision_messaging.application.dto import MessageContentDTO, MessageDTO
from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import (
    ConversationStoreError,
    DomainValidationError,
)
from kvision_messaging.domain.services.messaging_identity import messaging_identity_for
from kvision_messaging.presentation.api.rate_limit import limiter
from kvision_messaging.presentation.dependencies.auth import (
    get_current_user,
    require_admin,
)

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class SendMessageRequest(BaseModel):
    """
    Request body for sending a message.

    {"receiver_id": "tea-1", "content": {"type": "text", "value": "Hello"}}
    {"receiver_id": "tea-1", "content": {"type": "file", "value":
        {"name": "a.pdf", "type": "application/pdf", "size": 1024,
         "data_url": "data:application/pdf;base64,..."}}}
    """

    receiver_id: str = Field(min_length=1)
    content: MessageContentDTO


class BroadcastRequest(BaseModel):
    target: BroadcastTarget = BroadcastTarget.ALL
    content: MessageContentDTO


class BroadcastResponse(BaseModel):
    sent: int


# ==================== ROUTER ====================

router = APIRouter(prefix="/messages", tags=["messages"])


# ==================== ENDPOINTS ====================


@router.post(
    "",
    response_model=MessageDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_message(
    body: SendMessageRequest,
    handler: FromDishka[SendMessageHandler],
    current_user: User = Depends(get_current_user),
):
    try:
        message = await handler.execute(
            SendMessageCommand(
                sender_id=messaging_identity_for(current_user),
                receiver_id=body.receiver_id,
                content=body.content.to_domain(),
            )
        )
    except DomainValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    except ConversationStoreError as e:
        logger.error("Send from %s failed: %s", current_user.id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return MessageDTO.from_entity(message)


@router.post(
    "/broadcast",
    response_model=BroadcastResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(Config.BROADCAST_RATE_LIMIT)
@inject
async def broadcast_message(
    request: Request,
    body: BroadcastRequest,
    handler: FromDishka[BroadcastMessageHandler],
    current_user: User = Depends(require_admin),
):
    """
    Send the same content to every non-admin user matching target.

    Recipients that fail are skipped; "sent" counts the successful ones.
    """
    try:
        sent = await handler.execute(
            BroadcastMessageCommand(
                target=body.target,
                content=body.content.to_domain(),
                sender_id=messaging_identity_for(current_user),
            )
        )
    except DomainValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e

    return BroadcastResponse(sent=sent)
