"""KVISION messaging service: conversations, unread tracking and admin broadcast."""

__version__ = "1.0.0"
