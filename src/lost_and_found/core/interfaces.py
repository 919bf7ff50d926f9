"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from lost_and_found.core.entities import (
    ClaimRequest,
    Conversation,
    Item,
    ParsedInput,
    ReputationRecord,
    ValidationResult,
)


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current timezone-aware time."""
        pass


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class AnswerScorer(ABC):
    """Interface for scoring a claimant's answers.

    Implementations must return a score in [0, 100], the flags raised, and
    is_valid == (score >= 60 and fewer than 3 flags).
    """

    @abstractmethod
    async def score(
        self, item: Item, answers: Sequence[str], now: datetime
    ) -> ValidationResult:
        """Score answers against the item's details."""
        pass


class InputParser(ABC):
    """Interface for turning a free-text report into item fields."""

    @abstractmethod
    async def parse(self, text: str, today: date) -> ParsedInput:
        """Extract item, category, color, location and date from text."""
        pass


class ItemStore(ABC):
    """Keyed storage of posted items."""

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[Item]:
        pass

    @abstractmethod
    def list_items(self) -> list[Item]:
        pass

    @abstractmethod
    def save_item(self, item: Item) -> None:
        pass


class ClaimStore(ABC):
    """Keyed storage of claim requests."""

    @abstractmethod
    def get_claim(self, claim_id: str) -> Optional[ClaimRequest]:
        pass

    @abstractmethod
    def list_claims(self, item_id: Optional[str] = None) -> list[ClaimRequest]:
        pass

    @abstractmethod
    def save_claim(self, claim: ClaimRequest) -> None:
        pass


class ConversationStore(ABC):
    """Storage of claim conversations, one per item."""

    @abstractmethod
    def get_conversation(self, item_id: str) -> Optional[Conversation]:
        pass

    @abstractmethod
    def save_conversation(self, conversation: Conversation) -> None:
        pass


class ReputationStore(ABC):
    """Storage of per-user claim history."""

    @abstractmethod
    def get_reputation(self, user_id: str) -> ReputationRecord:
        """Return the user's record, empty if never seen."""
        pass

    @abstractmethod
    def save_reputation(self, record: ReputationRecord) -> None:
        pass


class Store(ItemStore, ClaimStore, ConversationStore, ReputationStore):
    """Full persistence port used by the services."""

    @abstractmethod
    def lock(self, key: str) -> AbstractContextManager:
        """Serialize read-modify-write sequences on one entity key."""
        pass
