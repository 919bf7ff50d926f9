"""Rule-based scoring of claim answers.

This is the heuristic behind the AnswerScorer port. A model-backed scorer
can replace it as long as it keeps the score/flags/is_valid contract.
"""

from datetime import datetime, time
from typing import Optional, Sequence

from lost_and_found.core.entities import (
    ClaimError,
    ErrorKind,
    Item,
    ValidationResult,
    VerificationQuestion,
)

UNCERTAIN_PHRASES = ("i dont know", "not sure", "maybe", "idk", "dunno")
LOCATION_WORDS = ("location", "where")
TIME_WORDS = ("today", "yesterday", "morning", "afternoon", "evening")

MIN_ANSWER_LENGTH = 3
SHORT_PENALTY = 20
UNCERTAIN_PENALTY = 15
UNRELATED_PENALTY = 10
LOCATION_PENALTY = 25
TIME_PENALTY = 15

TIME_WINDOW_DAYS = 7
VALID_SCORE = 60
MAX_FLAGS = 3


def item_keywords(item: Item) -> list[str]:
    """Lower-cased item attributes an honest answer is likely to mention."""
    keywords = [item.title, item.category, item.color or "", item.location, *item.tags]
    return [keyword.lower() for keyword in keywords if keyword]


def mentions_item_details(answer: str, keywords: Sequence[str]) -> bool:
    """Substring match in either direction between answer words and keywords."""
    words = answer.lower().split()
    return any(
        word in keyword or keyword in word
        for keyword in keywords
        for word in words
    )


def is_valid_verdict(score: int, flags: Sequence[str]) -> bool:
    return score >= VALID_SCORE and len(flags) < MAX_FLAGS


def _days_since(item: Item, now: datetime) -> float:
    posted = datetime.combine(item.date, time.min, tzinfo=now.tzinfo)
    return abs((now - posted).total_seconds()) / 86400


def score_answers(item: Item, answers: Sequence[str], now: datetime) -> ValidationResult:
    """Score a claimant's answers against the item's details.

    Args:
        item: The claimed item, with its verification questions
        answers: Answers in question order
        now: Reference time for the time-consistency check
    """
    score = 100
    flags: list[str] = []
    keywords = item_keywords(item)
    questions = item.verification_questions

    for index, answer in enumerate(answers):
        if index >= len(questions):
            continue
        question = questions[index]
        label = f"Answer {index + 1}"
        lowered = answer.lower()

        if len(answer) < MIN_ANSWER_LENGTH:
            score -= SHORT_PENALTY
            flags.append(f"{label} too short")

        if any(phrase in lowered for phrase in UNCERTAIN_PHRASES):
            score -= UNCERTAIN_PENALTY
            flags.append(f"{label} appears uncertain")

        if question.correct_answer and not mentions_item_details(answer, keywords):
            score -= UNRELATED_PENALTY
            flags.append(f"{label} may not match item details")

    lowered_answers = [answer.lower() for answer in answers]

    if item.location and any(
        word in answer for answer in lowered_answers for word in LOCATION_WORDS
    ):
        location = item.location.lower()
        if not any(location in answer for answer in lowered_answers):
            score -= LOCATION_PENALTY
            flags.append("Location details inconsistent")

    if any(word in answer for answer in lowered_answers for word in TIME_WORDS):
        if _days_since(item, now) > TIME_WINDOW_DAYS:
            score -= TIME_PENALTY
            flags.append("Time reference may be inconsistent with item date")

    score = max(0, min(100, score))
    return ValidationResult(score=score, flags=tuple(flags), is_valid=is_valid_verdict(score, flags))


def check_required_answers(
    questions: Sequence[VerificationQuestion], answers: Sequence[str]
) -> Optional[ClaimError]:
    """Return an error for the first required question left blank."""
    for index, question in enumerate(questions):
        if not question.is_required:
            continue
        answer = answers[index] if index < len(answers) else ""
        if not answer.strip():
            return ClaimError(
                ErrorKind.MISSING_REQUIRED_ANSWER,
                f"Question {question.id} is required: {question.question}",
            )
    return None
