"""
REPOSITORY PORTS - Data access interfaces

Infrastructure provides the implementations (Redis, Supabase, in-memory, JSON file).
"""

from kvision_messaging.domain.ports.repositories.conversation_store import (
    ConversationStore,
)
from kvision_messaging.domain.ports.repositories.user_directory import UserDirectory

__all__ = [
    "ConversationStore",
    "UserDirectory",
]
