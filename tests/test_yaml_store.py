"""Tests for the YAML-backed store."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from tempfile import TemporaryDirectory

from lost_and_found.adapters.storage import YamlStore
from lost_and_found.core import (
    ClaimRequest,
    ClaimStatus,
    ReputationRecord,
    generate_questions,
    open_conversation,
    send_message,
)

CREATED = datetime(2024, 1, 16, 12, 0, tzinfo=timezone.utc)


def _claim(claim_id: str, item_id: str, created_at: datetime) -> ClaimRequest:
    return ClaimRequest(
        id=claim_id,
        item_id=item_id,
        claimant_id="user-2",
        answers=("cards", "library"),
        status=ClaimStatus.PENDING,
        created_at=created_at,
        validation_score=90,
        validation_flags=("Answer 1 too short",),
    )


def test_item_round_trip(make_item) -> None:
    """Test saving and loading an item with all optional fields."""
    with TemporaryDirectory() as tmpdir:
        storage_dir = Path(tmpdir)
        store = YamlStore(storage_dir)

        item = make_item(
            claim_token="CLM-ABC123",
            claim_token_expiry=CREATED + timedelta(days=7),
            created_at=CREATED,
            owner_id="user-1",
        )
        item = replace(item, verification_questions=tuple(generate_questions(item)))

        assert store.get_item(item.id) is None
        store.save_item(item)

        # Check artifact file exists
        artifacts = list(storage_dir.glob("items/*.yaml"))
        assert len(artifacts) == 1

        # Load from new store instance
        assert YamlStore(storage_dir).get_item(item.id) == item


def test_list_items_sorted(make_item) -> None:
    with TemporaryDirectory() as tmpdir:
        store = YamlStore(Path(tmpdir))

        store.save_item(make_item(id="late", created_at=CREATED))
        store.save_item(make_item(id="early", created_at=CREATED - timedelta(days=1)))
        store.save_item(make_item(id="undated"))

        assert [item.id for item in store.list_items()] == ["undated", "early", "late"]


def test_claims_filtered_by_item() -> None:
    with TemporaryDirectory() as tmpdir:
        store = YamlStore(Path(tmpdir))

        store.save_claim(_claim("c2", "item-1", CREATED))
        store.save_claim(_claim("c1", "item-1", CREATED - timedelta(hours=1)))
        store.save_claim(_claim("c3", "item-2", CREATED))

        assert [c.id for c in store.list_claims("item-1")] == ["c1", "c2"]
        assert len(store.list_claims()) == 3
        assert store.get_claim("c3") == _claim("c3", "item-2", CREATED)
        assert store.get_claim("missing") is None


def test_conversation_keyed_by_item() -> None:
    with TemporaryDirectory() as tmpdir:
        store = YamlStore(Path(tmpdir))
        conversation = send_message(open_conversation("conv-1", "item-1", "user-2"), "hi", CREATED)

        store.save_conversation(conversation)

        assert store.get_conversation("item-1") == conversation
        assert store.get_conversation("conv-1") is None


def test_reputation_defaults_and_round_trip() -> None:
    with TemporaryDirectory() as tmpdir:
        store = YamlStore(Path(tmpdir))

        assert store.get_reputation("new-user") == ReputationRecord(user_id="new-user")

        store.save_reputation(ReputationRecord("user-1", successful_claims=3, failed_claims=1,
                                               items_returned=2))
        record = store.get_reputation("user-1")

        assert record.score == 75
        assert record.successful_claims == 3


def test_stats_and_unsafe_keys(make_item) -> None:
    """Keys with path characters still map to distinct files."""
    with TemporaryDirectory() as tmpdir:
        store = YamlStore(Path(tmpdir))

        store.save_item(make_item(id="../a/b"))
        store.save_item(make_item(id="a-b"))

        stats = store.get_stats()
        assert stats["by_section"]["items"] == 2
        assert stats["total"] == 2
        assert store.get_item("../a/b").id == "../a/b"


def test_lock_is_reentrant() -> None:
    with TemporaryDirectory() as tmpdir:
        store = YamlStore(Path(tmpdir))

        with store.lock("item-1"):
            with store.lock("item-1"):
                pass
