"""
DomainValidationError - Raised when input is rejected before any store call.
Maps to: HTTP 422 Unprocessable Entity
"""


class DomainValidationError(Exception):
    """Exception raised for domain validation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AttachmentRejectedError(DomainValidationError):
    """Attachment is too large or of a disallowed type."""
