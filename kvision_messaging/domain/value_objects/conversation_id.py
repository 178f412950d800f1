"""
ConversationId Value Object - deterministic identity of a two-party conversation.

The id is the two participant ids sorted lexicographically and joined with
CONVERSATION_ID_SEPARATOR, so either party can recompute it without a lookup:

    conversation_id_for("stu-1", "kvision_admin_inbox").value
    -> "kvision_admin_inbox--stu-1"
"""

from dataclasses import dataclass

from kvision_messaging.domain.exceptions.validation_error import DomainValidationError

CONVERSATION_ID_SEPARATOR = "--"


@dataclass(frozen=True)
class ConversationId:
    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise DomainValidationError("Conversation ID cannot be empty")

    def __str__(self) -> str:
        return self.value


def _check_participant(participant_id: str) -> None:
    if not participant_id or not participant_id.strip():
        raise DomainValidationError("Participant ID cannot be empty")
    if CONVERSATION_ID_SEPARATOR in participant_id:
        raise DomainValidationError(
            f"Participant ID must not contain '{CONVERSATION_ID_SEPARATOR}': {participant_id}"
        )


def conversation_id_for(first_id: str, second_id: str) -> ConversationId:
    """Return the id of the conversation between two participants (order-independent)."""
    _check_participant(first_id)
    _check_participant(second_id)
    return ConversationId(CONVERSATION_ID_SEPARATOR.join(sorted((first_id, second_id))))
