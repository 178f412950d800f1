"""
MessageId Value Object - locally generated message identity.

Format: "msg-<epoch millis>-<random hex>". Generated on the client so a send
never needs a store-assigned id round trip.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from uuid import uuid4

from kvision_messaging.domain.exceptions.validation_error import DomainValidationError


@dataclass(frozen=True)
class MessageId:
    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise DomainValidationError("Message ID cannot be empty")

    @classmethod
    def generate(cls) -> MessageId:
        return cls(f"msg-{int(time.time() * 1000)}-{uuid4().hex[:12]}")

    def __str__(self) -> str:
        return self.value
