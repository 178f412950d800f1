"""
DOMAIN LAYER - Messaging rules for the KVISION school platform

This layer contains:
- Entities: Conversation, Message, User
- Value Objects: ConversationId, MessageId, MessageStatus, message content
- Services: Pure domain logic (messaging identity of a user)
- Ports: Interfaces the infrastructure implements (store, user directory)
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Redis, httpx, Pydantic, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
