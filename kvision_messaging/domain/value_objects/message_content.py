"""
Message content - a tagged union of text or file attachment.

    TextContent("Welcome")                 -> {"type": "text", "value": "Welcome"}
    FileContent(UploadedFile(...))         -> {"type": "file", "value": {...}}

Size and MIME-type limits for attachments are enforced by the application
layer (AttachmentPolicy) before a Message is built; here we only check shape.
"""

from dataclasses import dataclass
from typing import Literal, Union

from kvision_messaging.domain.exceptions.validation_error import DomainValidationError


@dataclass(frozen=True)
class UploadedFile:
    name: str
    type: str  # MIME type
    size: int  # bytes
    data_url: str  # inline data URL or a URL pointing at stored content

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise DomainValidationError("Attachment name cannot be empty")
        if not self.type or "/" not in self.type:
            raise DomainValidationError(f"Invalid attachment MIME type: {self.type}")
        if self.size < 0:
            raise DomainValidationError("Attachment size cannot be negative")
        if not self.data_url:
            raise DomainValidationError("Attachment content reference cannot be empty")


@dataclass(frozen=True)
class TextContent:
    value: str
    type: Literal["text"] = "text"

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise DomainValidationError("Message text cannot be empty")

    @property
    def preview(self) -> str:
        return self.value


@dataclass(frozen=True)
class FileContent:
    value: UploadedFile
    type: Literal["file"] = "file"

    @property
    def preview(self) -> str:
        return "File attachment"


MessageContent = Union[TextContent, FileContent]
