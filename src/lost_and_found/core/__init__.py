"""Core domain layer."""

from lost_and_found.core.conversation import open_conversation, resolve, send_message
from lost_and_found.core.entities import (
    ClaimError,
    ClaimRequest,
    ClaimStatus,
    Conversation,
    ConversationStatus,
    ErrorKind,
    FilterBucket,
    IssuedToken,
    Item,
    ItemKind,
    ItemStatus,
    MatchSuggestion,
    Message,
    ParsedInput,
    QuestionType,
    QuizQuestion,
    QuizResult,
    ReputationRecord,
    SenderRole,
    TrendingTag,
    ValidationResult,
    VerificationQuestion,
)
from lost_and_found.core.interfaces import (
    AnswerScorer,
    Clock,
    InputParser,
    Store,
    SystemClock,
)
from lost_and_found.core.matcher import compute_matches
from lost_and_found.core.quiz import evaluate_quiz, generate_choice_quiz, generate_questions
from lost_and_found.core.reputation import compute_reputation_score, level_for
from lost_and_found.core.tokens import TokenIssuer, check_token, issue_token, validate_token
from lost_and_found.core.validation import check_required_answers, score_answers

__all__ = [
    "Item",
    "ItemKind",
    "ItemStatus",
    "MatchSuggestion",
    "VerificationQuestion",
    "QuizQuestion",
    "QuestionType",
    "QuizResult",
    "ClaimRequest",
    "ClaimStatus",
    "ClaimError",
    "ErrorKind",
    "Conversation",
    "ConversationStatus",
    "Message",
    "SenderRole",
    "IssuedToken",
    "ValidationResult",
    "ReputationRecord",
    "ParsedInput",
    "FilterBucket",
    "TrendingTag",
    "AnswerScorer",
    "InputParser",
    "Clock",
    "SystemClock",
    "Store",
    "TokenIssuer",
    "compute_matches",
    "issue_token",
    "validate_token",
    "check_token",
    "generate_questions",
    "generate_choice_quiz",
    "evaluate_quiz",
    "score_answers",
    "check_required_answers",
    "open_conversation",
    "send_message",
    "resolve",
    "compute_reputation_score",
    "level_for",
]
