"""
ConversationStoreError - Raised when the backing store cannot be read or written.
Maps to: HTTP 502 Bad Gateway
"""


class ConversationStoreError(Exception):
    """Wraps network, permission and not-found failures of a store adapter."""

    def __init__(self, message: str = "Conversation store unavailable"):
        super().__init__(message)
        self.message = message
