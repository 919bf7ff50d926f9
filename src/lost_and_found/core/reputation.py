"""Reputation score and display levels."""

BASE_SCORE = 50
SUCCESS_BONUS = 10
FAILURE_PENALTY = 15
RETURN_BONUS = 5

LEVEL_STEP = 20

# (minimum points, level name), highest first
LEVELS: tuple[tuple[int, str], ...] = (
    (100, "Hero"),
    (50, "Expert"),
    (20, "Helper"),
    (5, "Finder"),
    (0, "Newbie"),
)


def compute_reputation_score(
    successful_claims: int, failed_claims: int, items_returned: int
) -> int:
    """Derive a 0-100 score from a user's claim history."""
    score = (
        BASE_SCORE
        + SUCCESS_BONUS * successful_claims
        - FAILURE_PENALTY * failed_claims
        + RETURN_BONUS * items_returned
    )
    return max(0, min(100, score))


def level_for(points: int) -> str:
    """Map points to a display level."""
    for minimum, name in LEVELS:
        if points >= minimum:
            return name
    return LEVELS[-1][1]


def progress_to_next_level(points: int) -> tuple[int, int]:
    """Progress within the current level step.

    Returns:
        Tuple of (points into the step, step size)
    """
    return max(points, 0) % LEVEL_STEP, LEVEL_STEP
