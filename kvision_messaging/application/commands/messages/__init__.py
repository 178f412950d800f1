"""Message commands."""

from .send_message import SendMessageCommand, SendMessageHandler
from .delete_message import DeleteMessageCommand, DeleteMessageHandler
from .broadcast_message import (
    BroadcastMessageCommand,
    BroadcastMessageHandler,
    BroadcastTarget,
)

__all__ = [
    "SendMessageCommand",
    "SendMessageHandler",
    "DeleteMessageCommand",
    "DeleteMessageHandler",
    "BroadcastMessageCommand",
    "BroadcastMessageHandler",
    "BroadcastTarget",
]
