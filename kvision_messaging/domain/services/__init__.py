"""DOMAIN SERVICES - Pure messaging rules that span entities."""

from kvision_messaging.domain.services.messaging_identity import (
    ADMIN_DISPLAY_NAME,
    ADMIN_VIRTUAL_USER_ID,
    admin_directory_entry,
    messaging_identity_for,
)

__all__ = [
    "ADMIN_DISPLAY_NAME",
    "ADMIN_VIRTUAL_USER_ID",
    "admin_directory_entry",
    "messaging_identity_for",
]
