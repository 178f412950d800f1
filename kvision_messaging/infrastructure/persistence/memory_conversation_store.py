"""
In-memory Conversation Store - records kept as encoded dicts in process memory.

Used for local development (STORE_BACKEND=memory) and tests. Records go
through the same codec as the real adapters, so callers never share mutable
state with the store.
"""

import copy
from typing import Any

from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.ports.repositories import ConversationStore
from kvision_messaging.infrastructure.persistence.record_codec import (
    conversation_to_record,
    decode_records,
)


class InMemoryConversationStore(ConversationStore):
    def __init__(self, records: list[dict[str, Any]] | None = None):
        self._records: dict[str, dict[str, Any]] = {
            r["id"]: copy.deepcopy(r) for r in records or []
        }
        self.upsert_count = 0

    @property
    def records(self) -> dict[str, dict[str, Any]]:
        return self._records

    async def fetch_all(self) -> list[Conversation]:
        return decode_records(copy.deepcopy(list(self._records.values())))

    async def upsert(self, conversation: Conversation) -> None:
        self._records[conversation.id.value] = conversation_to_record(conversation)
        self.upsert_count += 1
