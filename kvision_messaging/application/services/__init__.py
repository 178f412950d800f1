"""Application services shared by command and query handlers."""

from kvision_messaging.application.services.attachment_policy import AttachmentPolicy
from kvision_messaging.application.services.conversation_synchronizer import (
    ConversationSynchronizer,
    SyncState,
)

__all__ = [
    "AttachmentPolicy",
    "ConversationSynchronizer",
    "SyncState",
]
