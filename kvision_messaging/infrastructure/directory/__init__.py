"""User directory implementations."""

from kvision_messaging.infrastructure.directory.json_user_directory import (
    JsonUserDirectory,
)
from kvision_messaging.infrastructure.directory.memory_user_directory import (
    InMemoryUserDirectory,
)

__all__ = ["JsonUserDirectory", "InMemoryUserDirectory"]
