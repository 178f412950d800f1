"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (send, delete, mark read, broadcast)
- queries/   → Read operations (conversation views, contacts)
- services/  → Conversation synchronizer, attachment policy
- dto/       → Data Transfer Objects
- common/    → Shared interfaces (Command, Query base classes)

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
"""
