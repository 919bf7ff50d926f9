"""Core domain entities."""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Optional

from lost_and_found.core.reputation import compute_reputation_score, level_for


class ItemKind(str, Enum):
    """Whether an item was reported lost or found."""

    LOST = "lost"
    FOUND = "found"


class ItemStatus(str, Enum):
    """Lifecycle status of a posted item."""

    ACTIVE = "active"
    CLAIMED = "claimed"
    ARCHIVED = "archived"


class ClaimStatus(str, Enum):
    """Review status of a claim request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class ConversationStatus(str, Enum):
    """Stored status of a claim conversation."""

    ACTIVE = "active"
    RESOLVED = "resolved"
    EXPIRED = "expired"


class SenderRole(str, Enum):
    """Who wrote a conversation message."""

    POSTER = "poster"
    CLAIMANT = "claimant"


class QuestionType(str, Enum):
    """Answer format of a quick quiz question."""

    CHOICE = "choice"
    TEXT = "text"


class ErrorKind(str, Enum):
    """Recoverable domain errors returned to callers."""

    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    MISSING_REQUIRED_ANSWER = "missing_required_answer"
    CONVERSATION_EXPIRED = "conversation_expired"
    CONVERSATION_NOT_RESOLVABLE = "conversation_not_resolvable"
    CONVERSATION_CLOSED = "conversation_closed"
    EMPTY_MESSAGE = "empty_message"
    ITEM_NOT_CLAIMABLE = "item_not_claimable"
    CLAIM_NOT_FOUND = "claim_not_found"
    CLAIM_ALREADY_REVIEWED = "claim_already_reviewed"


@dataclass(frozen=True)
class ClaimError:
    """Error outcome returned instead of raised, so callers can branch on it."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class VerificationQuestion:
    """Item-specific question testing a claimant's knowledge of the item."""

    id: str
    question: str
    is_required: bool
    correct_answer: Optional[str] = None


@dataclass(frozen=True)
class QuizQuestion:
    """Question of the quick two-step claim quiz."""

    id: str
    question: str
    type: QuestionType
    options: tuple[str, ...] = ()
    correct_answer: Optional[str] = None


@dataclass(frozen=True)
class Item:
    """A reported lost or found item."""

    id: str
    kind: ItemKind
    category: str
    date: date
    title: str = ""
    description: str = ""
    location: str = ""
    color: Optional[str] = None
    tags: tuple[str, ...] = ()
    status: ItemStatus = ItemStatus.ACTIVE
    claim_token: Optional[str] = None
    claim_token_expiry: Optional[datetime] = None
    verification_questions: tuple[VerificationQuestion, ...] = ()
    created_at: Optional[datetime] = None
    owner_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Item id cannot be empty")
        if not self.category:
            raise ValueError("Category cannot be empty")
        for name in ("created_at", "claim_token_expiry"):
            value = getattr(self, name)
            if value is not None and value.tzinfo is None:
                raise ValueError(f"{name} must be timezone-aware")


@dataclass(frozen=True)
class MatchSuggestion:
    """Candidate pairing of a lost item with a found one (or vice versa)."""

    source_item_id: str
    candidate_item_id: str
    confidence: int
    reasons: tuple[str, ...]


@dataclass(frozen=True)
class IssuedToken:
    """Freshly issued claim token."""

    token: str
    expiry: Optional[datetime] = None


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of scoring a claimant's answers."""

    score: int
    flags: tuple[str, ...]
    is_valid: bool


@dataclass(frozen=True)
class QuizResult:
    """Outcome of the quick claim quiz."""

    passed: bool
    correct_count: int


@dataclass(frozen=True)
class ClaimRequest:
    """A claimant's request to take an item."""

    id: str
    item_id: str
    claimant_id: str
    answers: tuple[str, ...]
    status: ClaimStatus
    created_at: datetime
    claim_token: Optional[str] = None
    validation_score: Optional[int] = None
    validation_flags: tuple[str, ...] = ()
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None


@dataclass(frozen=True)
class Message:
    """Single message of a claim conversation."""

    id: str
    conversation_id: str
    sender_role: SenderRole
    text: str
    timestamp: datetime


@dataclass(frozen=True)
class Conversation:
    """Bounded message exchange between poster and claimant."""

    id: str
    item_id: str
    claimant_id: str
    messages: tuple[Message, ...] = ()
    status: ConversationStatus = ConversationStatus.ACTIVE
    max_messages: int = 5

    def __post_init__(self) -> None:
        if self.max_messages < 1:
            raise ValueError("max_messages must be positive")
        if len(self.messages) > self.max_messages:
            raise ValueError(
                f"Conversation holds {len(self.messages)} messages, limit is {self.max_messages}"
            )

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def effective_status(self) -> ConversationStatus:
        """Stored status, with a full active conversation reported as expired."""
        if self.status == ConversationStatus.ACTIVE and self.message_count >= self.max_messages:
            return ConversationStatus.EXPIRED
        return self.status

    @property
    def can_send(self) -> bool:
        return self.effective_status == ConversationStatus.ACTIVE


@dataclass(frozen=True)
class ParsedInput:
    """Structured fields extracted from a free-text item report."""

    item: str
    category: str
    location: str
    date: date
    description: str
    color: Optional[str] = None


@dataclass(frozen=True)
class FilterBucket:
    """Display group of related categories."""

    name: str
    icon: str
    categories: tuple[str, ...]
    count: int = 0


@dataclass(frozen=True)
class TrendingTag:
    """Tag popularity with a recent-activity trend."""

    name: str
    count: int
    trend: str


@dataclass(frozen=True)
class ReputationRecord:
    """A user's claim history."""

    user_id: str
    successful_claims: int = 0
    failed_claims: int = 0
    items_returned: int = 0

    @property
    def score(self) -> int:
        return compute_reputation_score(
            self.successful_claims, self.failed_claims, self.items_returned
        )

    @property
    def level(self) -> str:
        return level_for(self.score)

    def record_claim(self, approved: bool) -> "ReputationRecord":
        """Return the record with one more reviewed claim."""
        if approved:
            return replace(self, successful_claims=self.successful_claims + 1)
        return replace(self, failed_claims=self.failed_claims + 1)

    def record_return(self) -> "ReputationRecord":
        return replace(self, items_returned=self.items_returned + 1)
