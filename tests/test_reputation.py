"""Tests for reputation scoring."""

import pytest

from lost_and_found.core import compute_reputation_score, level_for
from lost_and_found.core.reputation import progress_to_next_level


def test_reputation_score() -> None:
    assert compute_reputation_score(3, 1, 2) == 75
    assert compute_reputation_score(0, 0, 0) == 50


def test_reputation_score_is_clamped() -> None:
    assert compute_reputation_score(10, 0, 10) == 100
    assert compute_reputation_score(0, 5, 0) == 0


def test_reputation_score_is_monotonic() -> None:
    base = compute_reputation_score(1, 1, 1)

    assert compute_reputation_score(2, 1, 1) >= base
    assert compute_reputation_score(1, 1, 2) >= base
    assert compute_reputation_score(1, 2, 1) <= base


@pytest.mark.parametrize(
    "points, level",
    [
        (0, "Newbie"),
        (4, "Newbie"),
        (5, "Finder"),
        (19, "Finder"),
        (20, "Helper"),
        (50, "Expert"),
        (99, "Expert"),
        (100, "Hero"),
        (250, "Hero"),
        (-3, "Newbie"),
    ],
)
def test_levels(points: int, level: str) -> None:
    assert level_for(points) == level


def test_progress_to_next_level() -> None:
    assert progress_to_next_level(45) == (5, 20)
    assert progress_to_next_level(40) == (0, 20)
    assert progress_to_next_level(-10) == (0, 20)
