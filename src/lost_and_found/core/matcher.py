"""Heuristic matching of lost items against found items."""

from typing import Iterable, Sequence

from lost_and_found.core.entities import Item, ItemStatus, MatchSuggestion

CATEGORY_WEIGHT = 40
COLOR_WEIGHT = 25
LOCATION_WEIGHT = 20
SAME_DAY_WEIGHT = 15
NEAR_DATE_WEIGHT = 10
TAG_WEIGHT = 5
KEYWORD_WEIGHT = 3

MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 95
MIN_KEYWORD_LENGTH = 4


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def is_candidate(target: Item, candidate: Item) -> bool:
    """Only active items of the opposite kind can match."""
    return (
        candidate.id != target.id
        and candidate.kind != target.kind
        and candidate.status == ItemStatus.ACTIVE
    )


def score_pair(target: Item, candidate: Item) -> tuple[int, list[str]]:
    """Score one candidate against the target.

    Returns:
        Tuple of (raw score, reasons in signal order)
    """
    score = 0
    reasons: list[str] = []

    if target.category == candidate.category:
        score += CATEGORY_WEIGHT
        reasons.append(f"Same category: {target.category}")

    if target.color and candidate.color and target.color == candidate.color:
        score += COLOR_WEIGHT
        reasons.append(f"Same color: {target.color}")

    if target.location == candidate.location:
        score += LOCATION_WEIGHT
        reasons.append(f"Same location: {target.location}")

    days_apart = abs((target.date - candidate.date).days)
    if days_apart <= 1:
        score += SAME_DAY_WEIGHT
        reasons.append("Posted within 1 day")
    elif days_apart <= 3:
        score += NEAR_DATE_WEIGHT
        reasons.append("Posted within 3 days")

    candidate_tags = set(candidate.tags)
    common_tags = [tag for tag in _unique(target.tags) if tag in candidate_tags]
    if common_tags:
        score += TAG_WEIGHT * len(common_tags)
        reasons.append(f"Common tags: {', '.join(common_tags)}")

    candidate_words = set(candidate.description.lower().split())
    common_words = [
        word
        for word in _unique(target.description.lower().split())
        if len(word) >= MIN_KEYWORD_LENGTH and word in candidate_words
    ]
    if common_words:
        score += KEYWORD_WEIGHT * len(common_words)
        reasons.append("Similar description keywords")

    return score, reasons


def compute_matches(target: Item, pool: Sequence[Item]) -> list[MatchSuggestion]:
    """Rank opposite-kind items in the pool by likelihood of being the target.

    Suggestions below the minimum confidence are dropped. Ties keep the
    pool's original order.
    """
    suggestions = []
    for candidate in pool:
        if not is_candidate(target, candidate):
            continue

        score, reasons = score_pair(target, candidate)
        if score < MIN_CONFIDENCE:
            continue

        suggestions.append(
            MatchSuggestion(
                source_item_id=target.id,
                candidate_item_id=candidate.id,
                confidence=min(score, MAX_CONFIDENCE),
                reasons=tuple(reasons),
            )
        )

    # sorted() is stable
    return sorted(suggestions, key=lambda s: s.confidence, reverse=True)
