"""Store that keeps each entity as an individual YAML artifact."""

import hashlib
import logging
import re
import threading
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator, Optional

import yaml

from lost_and_found.core.entities import (
    ClaimRequest,
    ClaimStatus,
    Conversation,
    ConversationStatus,
    Item,
    ItemKind,
    ItemStatus,
    Message,
    ReputationRecord,
    SenderRole,
    VerificationQuestion,
)
from lost_and_found.core.interfaces import Store

logger = logging.getLogger(__name__)

SECTIONS = ("items", "claims", "conversations", "reputation")


def _dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def item_to_dict(item: Item) -> dict[str, Any]:
    return {
        "id": item.id,
        "kind": item.kind.value,
        "category": item.category,
        "title": item.title,
        "description": item.description,
        "location": item.location,
        "color": item.color,
        "date": item.date.isoformat(),
        "tags": list(item.tags),
        "status": item.status.value,
        "claim_token": item.claim_token,
        "claim_token_expiry": _iso(item.claim_token_expiry),
        "verification_questions": [
            {
                "id": q.id,
                "question": q.question,
                "is_required": q.is_required,
                "correct_answer": q.correct_answer,
            }
            for q in item.verification_questions
        ],
        "created_at": _iso(item.created_at),
        "owner_id": item.owner_id,
    }


def item_from_dict(data: dict[str, Any]) -> Item:
    return Item(
        id=data["id"],
        kind=ItemKind(data["kind"]),
        category=data["category"],
        title=data.get("title", ""),
        description=data.get("description", ""),
        location=data.get("location", ""),
        color=data.get("color"),
        date=date.fromisoformat(data["date"]),
        tags=tuple(data.get("tags") or ()),
        status=ItemStatus(data.get("status", ItemStatus.ACTIVE.value)),
        claim_token=data.get("claim_token"),
        claim_token_expiry=_dt(data.get("claim_token_expiry")),
        verification_questions=tuple(
            VerificationQuestion(
                id=q["id"],
                question=q["question"],
                is_required=q["is_required"],
                correct_answer=q.get("correct_answer"),
            )
            for q in data.get("verification_questions") or ()
        ),
        created_at=_dt(data.get("created_at")),
        owner_id=data.get("owner_id"),
    )


def claim_to_dict(claim: ClaimRequest) -> dict[str, Any]:
    return {
        "id": claim.id,
        "item_id": claim.item_id,
        "claimant_id": claim.claimant_id,
        "claim_token": claim.claim_token,
        "answers": list(claim.answers),
        "status": claim.status.value,
        "validation_score": claim.validation_score,
        "validation_flags": list(claim.validation_flags),
        "created_at": _iso(claim.created_at),
        "reviewed_at": _iso(claim.reviewed_at),
        "review_notes": claim.review_notes,
    }


def claim_from_dict(data: dict[str, Any]) -> ClaimRequest:
    return ClaimRequest(
        id=data["id"],
        item_id=data["item_id"],
        claimant_id=data["claimant_id"],
        claim_token=data.get("claim_token"),
        answers=tuple(data.get("answers") or ()),
        status=ClaimStatus(data["status"]),
        validation_score=data.get("validation_score"),
        validation_flags=tuple(data.get("validation_flags") or ()),
        created_at=datetime.fromisoformat(data["created_at"]),
        reviewed_at=_dt(data.get("reviewed_at")),
        review_notes=data.get("review_notes"),
    )


def conversation_to_dict(conversation: Conversation) -> dict[str, Any]:
    return {
        "id": conversation.id,
        "item_id": conversation.item_id,
        "claimant_id": conversation.claimant_id,
        "status": conversation.status.value,
        "message_count": conversation.message_count,
        "max_messages": conversation.max_messages,
        "messages": [
            {
                "id": m.id,
                "sender_role": m.sender_role.value,
                "text": m.text,
                "timestamp": m.timestamp.isoformat(),
            }
            for m in conversation.messages
        ],
    }


def conversation_from_dict(data: dict[str, Any]) -> Conversation:
    return Conversation(
        id=data["id"],
        item_id=data["item_id"],
        claimant_id=data["claimant_id"],
        status=ConversationStatus(data["status"]),
        max_messages=data["max_messages"],
        messages=tuple(
            Message(
                id=m["id"],
                conversation_id=data["id"],
                sender_role=SenderRole(m["sender_role"]),
                text=m["text"],
                timestamp=datetime.fromisoformat(m["timestamp"]),
            )
            for m in data.get("messages") or ()
        ),
    )


class YamlStore(Store):
    """Keep items, claims, conversations and reputation as YAML files."""

    def __init__(self, storage_dir: Path) -> None:
        self.storage_dir = storage_dir
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._ensure_structure()

    def _ensure_structure(self) -> None:
        """Create directory structure for artifacts."""
        for section in SECTIONS:
            (self.storage_dir / section).mkdir(parents=True, exist_ok=True)

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        with self._locks_guard:
            key_lock = self._locks.setdefault(key, threading.RLock())
        with key_lock:
            yield

    def get_item(self, item_id: str) -> Optional[Item]:
        data = self._load("items", item_id)
        return item_from_dict(data) if data else None

    def list_items(self) -> list[Item]:
        items = [item_from_dict(data) for data in self._load_all("items")]
        return sorted(items, key=lambda i: (_iso(i.created_at) or "", i.id))

    def save_item(self, item: Item) -> None:
        self._save("items", item.id, item_to_dict(item))

    def get_claim(self, claim_id: str) -> Optional[ClaimRequest]:
        data = self._load("claims", claim_id)
        return claim_from_dict(data) if data else None

    def list_claims(self, item_id: Optional[str] = None) -> list[ClaimRequest]:
        claims = [claim_from_dict(data) for data in self._load_all("claims")]
        if item_id is not None:
            claims = [claim for claim in claims if claim.item_id == item_id]
        return sorted(claims, key=lambda c: c.created_at)

    def save_claim(self, claim: ClaimRequest) -> None:
        self._save("claims", claim.id, claim_to_dict(claim))

    def get_conversation(self, item_id: str) -> Optional[Conversation]:
        data = self._load("conversations", item_id)
        return conversation_from_dict(data) if data else None

    def save_conversation(self, conversation: Conversation) -> None:
        self._save("conversations", conversation.item_id, conversation_to_dict(conversation))

    def get_reputation(self, user_id: str) -> ReputationRecord:
        data = self._load("reputation", user_id)
        if not data:
            return ReputationRecord(user_id=user_id)
        return ReputationRecord(
            user_id=user_id,
            successful_claims=data.get("successful_claims", 0),
            failed_claims=data.get("failed_claims", 0),
            items_returned=data.get("items_returned", 0),
        )

    def save_reputation(self, record: ReputationRecord) -> None:
        self._save("reputation", record.user_id, {
            "user_id": record.user_id,
            "successful_claims": record.successful_claims,
            "failed_claims": record.failed_claims,
            "items_returned": record.items_returned,
            "score": record.score,
            "level": record.level,
        })

    def get_stats(self) -> dict:
        """Count stored artifacts per section."""
        by_section = {
            section: len(list((self.storage_dir / section).glob("*.yaml")))
            for section in SECTIONS
        }
        return {"total": sum(by_section.values()), "by_section": by_section}

    def _get_artifact_path(self, section: str, key: str) -> Path:
        """Get path for artifact file."""
        # Create safe filename from key plus a hash for uniqueness
        safe_key = re.sub(r"[^\w\s-]", "", key)
        safe_key = re.sub(r"[-\s]+", "-", safe_key)[:50]
        key_hash = hashlib.md5(key.encode()).hexdigest()[:8]
        return self.storage_dir / section / f"{safe_key}_{key_hash}.yaml"

    def _save(self, section: str, key: str, data: dict[str, Any]) -> None:
        path = self._get_artifact_path(section, key)
        tmp_path = path.with_suffix(".yaml.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
        tmp_path.replace(path)
        logger.debug("Saved %s/%s to %s", section, key, path)

    def _load(self, section: str, key: str) -> Optional[dict[str, Any]]:
        path = self._get_artifact_path(section, key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    def _load_all(self, section: str) -> list[dict[str, Any]]:
        records = []
        for path in sorted((self.storage_dir / section).glob("*.yaml")):
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
            if data:
                records.append(data)
        return records
