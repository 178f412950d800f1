"""
Record codec - maps Conversation entities to the stored JSON record and back.

Stored shape (camelCase, shared with the dashboards' existing table):

    {
        "id": "kvision_admin_inbox--stu-1",
        "participants": ["kvision_admin_inbox", "stu-1"],
        "messages": [
            {
                "id": "msg-1735725600000-3f9c0a1b2c4d",
                "senderId": "kvision_admin_inbox",
                "receiverId": "stu-1",
                "timestamp": "2025-01-01T10:00:00.000Z",
                "status": "sent",
                "content": {"type": "text", "value": "Welcome"}
            }
        ]
    }

File content values are {"name", "type", "size", "dataUrl"}.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.entities.message import Message
from kvision_messaging.domain.exceptions import DomainValidationError
from kvision_messaging.domain.value_objects.conversation_id import (
    ConversationId,
    conversation_id_for,
)
from kvision_messaging.domain.value_objects.message_content import (
    FileContent,
    MessageContent,
    TextContent,
    UploadedFile,
)
from kvision_messaging.domain.value_objects.message_id import MessageId
from kvision_messaging.domain.value_objects.message_status import MessageStatus

logger = logging.getLogger(__name__)


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be an ISO-8601 string: {value!r}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def content_to_record(content: MessageContent) -> dict[str, Any]:
    if isinstance(content, FileContent):
        file = content.value
        return {
            "type": "file",
            "value": {
                "name": file.name,
                "type": file.type,
                "size": file.size,
                "dataUrl": file.data_url,
            },
        }
    return {"type": "text", "value": content.value}


def content_from_record(data: dict[str, Any]) -> MessageContent:
    if not isinstance(data, dict):
        raise ValueError(f"Message content must be an object: {data!r}")
    kind = data.get("type")
    if kind == "text":
        return TextContent(value=data["value"])
    if kind == "file":
        file = data["value"]
        return FileContent(
            value=UploadedFile(
                name=file["name"],
                type=file["type"],
                size=int(file["size"]),
                data_url=file["dataUrl"],
            )
        )
    raise ValueError(f"Unknown message content type: {kind!r}")


def message_to_record(message: Message) -> dict[str, Any]:
    return {
        "id": message.id.value,
        "senderId": message.sender_id,
        "receiverId": message.receiver_id,
        "timestamp": format_timestamp(message.timestamp),
        "status": message.status.value,
        "content": content_to_record(message.content),
    }


def message_from_record(data: dict[str, Any]) -> Message:
    return Message(
        id=MessageId(data["id"]),
        sender_id=data["senderId"],
        receiver_id=data["receiverId"],
        timestamp=parse_timestamp(data["timestamp"]),
        content=content_from_record(data["content"]),
        status=MessageStatus(data.get("status", MessageStatus.SENT.value)),
    )


def conversation_to_record(conversation: Conversation) -> dict[str, Any]:
    return {
        "id": conversation.id.value,
        "participants": list(conversation.participants),
        "messages": [message_to_record(m) for m in conversation.messages],
    }


def conversation_from_record(data: dict[str, Any]) -> Conversation:
    conversation = Conversation(
        id=ConversationId(data["id"]),
        participants=tuple(data["participants"]),
        messages=[message_from_record(m) for m in data.get("messages") or []],
    )
    expected = conversation_id_for(*conversation.participants)
    if conversation.id != expected:
        raise DomainValidationError(
            f"Conversation id {conversation.id} does not match participants {expected}"
        )
    return conversation


def decode_records(records: Iterable[Any]) -> list[Conversation]:
    """Decode stored records, skipping (and logging) any that are malformed."""
    conversations = []
    for record in records:
        try:
            conversations.append(conversation_from_record(record))
        except (
            KeyError, TypeError, ValueError, AttributeError, DomainValidationError
        ) as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            logger.warning("Skipping malformed conversation record %s: %s", record_id, e)
    return conversations
