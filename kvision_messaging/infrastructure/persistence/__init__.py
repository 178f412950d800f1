"""
Persistence Layer - conversation store implementations.

All adapters share the same stored record shape (record_codec).
"""

from kvision_messaging.infrastructure.persistence.memory_conversation_store import (
    InMemoryConversationStore,
)
from kvision_messaging.infrastructure.persistence.redis_conversation_store import (
    RedisConversationStore,
)
from kvision_messaging.infrastructure.persistence.supabase_conversation_store import (
    SupabaseConversationStore,
)

__all__ = [
    "InMemoryConversationStore",
    "RedisConversationStore",
    "SupabaseConversationStore",
]
