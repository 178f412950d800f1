"""
Conversation Store Port - the only two operations messaging needs from the backend.

The store is treated as a dumb key-value table keyed by conversation id:
no deltas, no server-side filtering, no transactions, no delete.

Implementations:
- kvision_messaging/infrastructure/persistence/redis_conversation_store.py
- kvision_messaging/infrastructure/persistence/supabase_conversation_store.py
- kvision_messaging/infrastructure/persistence/memory_conversation_store.py
"""

from abc import ABC, abstractmethod

from kvision_messaging.domain.entities.conversation import Conversation


class ConversationStore(ABC):
    @abstractmethod
    async def fetch_all(self) -> list[Conversation]:
        """Full snapshot of every stored conversation.

        Raises:
            ConversationStoreError: the store could not be read
        """

    @abstractmethod
    async def upsert(self, conversation: Conversation) -> None:
        """Create or fully replace the record with conversation.id.

        Raises:
            ConversationStoreError: the store could not be written
        """
