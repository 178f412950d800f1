"""Conversation commands."""

from .mark_as_read import MarkConversationReadCommand, MarkConversationReadHandler

__all__ = [
    "MarkConversationReadCommand",
    "MarkConversationReadHandler",
]
