"""Message DTOs for API request/response."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from kvision_messaging.domain.entities.message import Message
from kvision_messaging.domain.value_objects.message_content import (
    FileContent,
    MessageContent,
    TextContent,
    UploadedFile,
)


class UploadedFileDTO(BaseModel):
    name: str
    type: str
    size: int = Field(ge=0)
    data_url: str

    def to_domain(self) -> UploadedFile:
        return UploadedFile(
            name=self.name, type=self.type, size=self.size, data_url=self.data_url
        )


class TextContentDTO(BaseModel):
    type: Literal["text"] = "text"
    value: str

    def to_domain(self) -> TextContent:
        return TextContent(value=self.value.strip())


class FileContentDTO(BaseModel):
    type: Literal["file"] = "file"
    value: UploadedFileDTO

    def to_domain(self) -> FileContent:
        return FileContent(value=self.value.to_domain())


MessageContentDTO = Annotated[
    Union[TextContentDTO, FileContentDTO], Field(discriminator="type")
]


def content_to_dto(content: MessageContent) -> Union[TextContentDTO, FileContentDTO]:
    if isinstance(content, FileContent):
        file = content.value
        return FileContentDTO(
            value=UploadedFileDTO(
                name=file.name, type=file.type, size=file.size, data_url=file.data_url
            )
        )
    return TextContentDTO(value=content.value)


class MessageDTO(BaseModel):
    """DTO for message data returned to the dashboards."""

    id: str
    sender_id: str
    receiver_id: str
    timestamp: datetime
    status: str
    content: MessageContentDTO

    @classmethod
    def from_entity(cls, message: Message) -> MessageDTO:
        return cls(
            id=message.id.value,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            timestamp=message.timestamp,
            status=message.status.value,
            content=content_to_dto(message.content),
        )
