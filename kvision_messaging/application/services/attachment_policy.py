"""
Attachment policy - size and MIME-type checks for file messages.

Runs before a Message is constructed, so a rejected file never reaches the
store. The declared size is checked, and for inline base64 data URLs the
decoded payload length as well (a client can under-report `size`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from kvision_messaging.config.settings import Config
from kvision_messaging.domain.exceptions.validation_error import (
    AttachmentRejectedError,
)
from kvision_messaging.domain.value_objects.message_content import UploadedFile

logger = logging.getLogger(__name__)

_BYTES_PER_MB = 1024 * 1024


def inline_payload_size(data_url: str) -> int | None:
    """Decoded byte length of a base64 data URL, None for any other reference."""
    if not data_url.startswith("data:"):
        return None
    header, _, payload = data_url.partition(",")
    if not header.endswith(";base64"):
        return len(payload)
    payload = payload.strip()
    padding = payload.count("=", max(len(payload) - 2, 0))
    return len(payload) * 3 // 4 - padding


@dataclass
class AttachmentPolicy:
    max_bytes: int
    allowed_types: list[str] = field(default_factory=list)

    @classmethod
    def from_config(cls) -> AttachmentPolicy:
        return cls(
            max_bytes=int(Config.MAX_ATTACHMENT_MB * _BYTES_PER_MB),
            allowed_types=list(Config.ALLOWED_ATTACHMENT_TYPES),
        )

    def is_type_allowed(self, mime_type: str) -> bool:
        if not self.allowed_types:
            return True
        mime_type = mime_type.lower()
        for allowed in self.allowed_types:
            allowed = allowed.lower()
            if allowed.endswith("/*"):
                if mime_type.startswith(allowed[:-1]):
                    return True
            elif mime_type == allowed:
                return True
        return False

    def validate(self, file: UploadedFile) -> None:
        """Raise AttachmentRejectedError when the file may not be sent."""
        limit_mb = self.max_bytes / _BYTES_PER_MB
        if file.size > self.max_bytes:
            logger.info("Rejected attachment %s: %d bytes", file.name, file.size)
            raise AttachmentRejectedError(f"File is too large. Max {limit_mb:g}MB.")

        payload_size = inline_payload_size(file.data_url)
        if payload_size is not None and payload_size > self.max_bytes:
            logger.info(
                "Rejected attachment %s: inline payload of %d bytes",
                file.name,
                payload_size,
            )
            raise AttachmentRejectedError(f"File is too large. Max {limit_mb:g}MB.")

        if not self.is_type_allowed(file.type):
            logger.info("Rejected attachment %s: type %s", file.name, file.type)
            raise AttachmentRejectedError(f"File type not allowed: {file.type}")
