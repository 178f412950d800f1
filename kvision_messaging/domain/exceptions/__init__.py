"""
DOMAIN EXCEPTIONS - Business rule violations

Raised by domain and application logic, mapped to HTTP status codes by the
presentation layer.
"""

from kvision_messaging.domain.exceptions.entity_not_found import EntityNotFoundError
from kvision_messaging.domain.exceptions.access_denied import AccessDeniedError
from kvision_messaging.domain.exceptions.validation_error import (
    AttachmentRejectedError,
    DomainValidationError,
)
from kvision_messaging.domain.exceptions.store_error import ConversationStoreError

__all__ = [
    "EntityNotFoundError",
    "AccessDeniedError",
    "AttachmentRejectedError",
    "DomainValidationError",
    "ConversationStoreError",
]
