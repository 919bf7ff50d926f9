"""Tests for core entities."""

from datetime import date, datetime, timezone

import pytest

from lost_and_found.core import (
    Conversation,
    ConversationStatus,
    Item,
    ItemKind,
    ItemStatus,
    Message,
    ReputationRecord,
    SenderRole,
)


def _message(index: int) -> Message:
    return Message(
        id=f"c-{index}",
        conversation_id="c",
        sender_role=SenderRole.CLAIMANT,
        text="hello",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_item_creation() -> None:
    """Test creating a valid item."""
    item = Item(
        id="1",
        kind=ItemKind.FOUND,
        category="phone",
        date=date(2024, 1, 12),
        color="black",
        tags=("phone", "black", "phone"),
    )

    assert item.status == ItemStatus.ACTIVE
    assert item.tags == ("phone", "black", "phone")
    assert item.claim_token is None
    assert item.verification_questions == ()


def test_item_validation() -> None:
    """Test item validation."""
    with pytest.raises(ValueError, match="Item id cannot be empty"):
        Item(id="", kind=ItemKind.LOST, category="wallet", date=date(2024, 1, 1))

    with pytest.raises(ValueError, match="Category cannot be empty"):
        Item(id="1", kind=ItemKind.LOST, category="", date=date(2024, 1, 1))


def test_item_rejects_naive_datetimes() -> None:
    """Naive times cannot be compared with the clock, so they are refused."""
    with pytest.raises(ValueError, match="created_at must be timezone-aware"):
        Item(id="1", kind=ItemKind.LOST, category="keys", date=date(2024, 1, 1),
             created_at=datetime(2024, 1, 1, 12, 0))

    with pytest.raises(ValueError, match="claim_token_expiry must be timezone-aware"):
        Item(id="1", kind=ItemKind.LOST, category="keys", date=date(2024, 1, 1),
             claim_token="CLM-ABC123", claim_token_expiry=datetime(2024, 1, 8))


def test_item_is_immutable() -> None:
    """Items are value objects; updates go through dataclasses.replace."""
    item = Item(id="1", kind=ItemKind.LOST, category="keys", date=date(2024, 1, 1))

    with pytest.raises(AttributeError):
        item.status = ItemStatus.CLAIMED  # type: ignore[misc]


def test_conversation_message_count_follows_messages() -> None:
    conversation = Conversation(
        id="c", item_id="i", claimant_id="u", messages=(_message(1), _message(2))
    )

    assert conversation.message_count == 2
    assert conversation.can_send


def test_conversation_rejects_more_than_max_messages() -> None:
    with pytest.raises(ValueError, match="limit is 2"):
        Conversation(
            id="c",
            item_id="i",
            claimant_id="u",
            messages=tuple(_message(i) for i in range(3)),
            max_messages=2,
        )


def test_full_conversation_is_effectively_expired() -> None:
    conversation = Conversation(
        id="c",
        item_id="i",
        claimant_id="u",
        messages=(_message(1), _message(2)),
        max_messages=2,
    )

    assert conversation.status == ConversationStatus.ACTIVE
    assert conversation.effective_status == ConversationStatus.EXPIRED
    assert not conversation.can_send


def test_reputation_record_updates() -> None:
    record = ReputationRecord(user_id="u")

    record = record.record_claim(approved=True).record_claim(approved=False).record_return()

    assert record.successful_claims == 1
    assert record.failed_claims == 1
    assert record.items_returned == 1
    assert record.score == 50
    assert record.level == "Expert"
