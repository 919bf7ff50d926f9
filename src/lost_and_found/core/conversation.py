"""Bounded poster/claimant conversation state machine."""

from dataclasses import replace
from datetime import datetime
from typing import Union

from lost_and_found.core.entities import (
    ClaimError,
    Conversation,
    ConversationStatus,
    ErrorKind,
    Message,
    SenderRole,
)

DEFAULT_MAX_MESSAGES = 5


def open_conversation(
    conversation_id: str,
    item_id: str,
    claimant_id: str,
    max_messages: int = DEFAULT_MAX_MESSAGES,
) -> Conversation:
    """Start an empty, active conversation about an item."""
    return Conversation(
        id=conversation_id,
        item_id=item_id,
        claimant_id=claimant_id,
        max_messages=max_messages,
    )


def next_sender(conversation: Conversation) -> SenderRole:
    """Roles alternate, starting with the claimant who opened the conversation."""
    if conversation.message_count % 2 == 0:
        return SenderRole.CLAIMANT
    return SenderRole.POSTER


def send_message(
    conversation: Conversation, text: str, now: datetime
) -> Union[Conversation, ClaimError]:
    """Append a message, returning the updated conversation or an error."""
    if conversation.status == ConversationStatus.RESOLVED:
        return ClaimError(ErrorKind.CONVERSATION_CLOSED, "Conversation is already resolved")

    if not conversation.can_send:
        return ClaimError(
            ErrorKind.CONVERSATION_EXPIRED,
            f"Message limit of {conversation.max_messages} reached",
        )

    if not text.strip():
        return ClaimError(ErrorKind.EMPTY_MESSAGE, "Message cannot be empty")

    message = Message(
        id=f"{conversation.id}-{conversation.message_count + 1}",
        conversation_id=conversation.id,
        sender_role=next_sender(conversation),
        text=text,
        timestamp=now,
    )
    return replace(conversation, messages=conversation.messages + (message,))


def resolve(conversation: Conversation) -> Union[Conversation, ClaimError]:
    """Mark the conversation resolved once both sides have spoken."""
    if conversation.effective_status != ConversationStatus.ACTIVE:
        return ClaimError(
            ErrorKind.CONVERSATION_NOT_RESOLVABLE,
            f"Conversation is {conversation.effective_status.value}",
        )

    if conversation.message_count <= 1:
        return ClaimError(
            ErrorKind.CONVERSATION_NOT_RESOLVABLE,
            "At least two messages are needed before resolving",
        )

    return replace(conversation, status=ConversationStatus.RESOLVED)
