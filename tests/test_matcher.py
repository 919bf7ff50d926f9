"""Tests for item matching."""

from datetime import date

from lost_and_found.core import ItemKind, ItemStatus, compute_matches
from lost_and_found.core.matcher import score_pair


def test_identical_items_are_capped_at_95(make_item) -> None:
    """Category, color, location and date alone already reach the cap."""
    lost = make_item(id="a", tags=(), description="")
    found = make_item(id="b", kind=ItemKind.FOUND, tags=(), description="")

    matches = compute_matches(lost, [lost, found])

    assert len(matches) == 1
    assert matches[0].source_item_id == "a"
    assert matches[0].candidate_item_id == "b"
    assert matches[0].confidence == 95
    assert matches[0].reasons == (
        "Same category: wallet",
        "Same color: black",
        "Same location: Library",
        "Posted within 1 day",
    )


def test_candidate_filter(make_item) -> None:
    """Never match the item itself, same-kind items or inactive items."""
    target = make_item(id="a")
    pool = [
        target,
        make_item(id="same-kind"),
        make_item(id="claimed", kind=ItemKind.FOUND, status=ItemStatus.CLAIMED),
        make_item(id="archived", kind=ItemKind.FOUND, status=ItemStatus.ARCHIVED),
        make_item(id="ok", kind=ItemKind.FOUND),
    ]

    matches = compute_matches(target, pool)

    assert [m.candidate_item_id for m in matches] == ["ok"]


def test_date_proximity_bands(make_item) -> None:
    target = make_item(id="a", color=None, location="X", tags=(), description="")

    two_days = make_item(id="b", kind=ItemKind.FOUND, date=date(2024, 1, 17), color=None,
                         location="Y", tags=(), description="")
    five_days = make_item(id="c", kind=ItemKind.FOUND, date=date(2024, 1, 20), color=None,
                          location="Y", tags=(), description="")

    assert score_pair(target, two_days) == (50, ["Same category: wallet", "Posted within 3 days"])
    assert score_pair(target, five_days) == (40, ["Same category: wallet"])


def test_tags_are_case_sensitive_and_counted_once(make_item) -> None:
    target = make_item(id="a", tags=("leather", "leather", "Cards", "nike"))
    candidate = make_item(id="b", kind=ItemKind.FOUND, tags=("leather", "cards", "nike"))

    score, reasons = score_pair(target, candidate)

    assert "Common tags: leather, nike" in reasons
    # 40 + 25 + 20 + 15, two tags, seven shared description words
    assert score == 100 + 2 * 5 + 7 * 3


def test_description_keywords(make_item) -> None:
    target = make_item(id="a", category="bag", color=None, location="X", tags=(),
                       date=date(2024, 1, 1),
                       description="Red Nike backpack with laptop")
    candidate = make_item(id="b", kind=ItemKind.FOUND, category="bag", color=None,
                          location="Y", tags=(), date=date(2024, 2, 1),
                          description="red backpack has a LAPTOP inside")

    score, reasons = score_pair(target, candidate)

    # "backpack" and "laptop" are shared; "red" is too short, "with" absent
    assert score == 40 + 2 * 3
    assert reasons[-1] == "Similar description keywords"


def test_below_threshold_is_dropped(make_item) -> None:
    target = make_item(id="a", category="wallet", color=None, location="X", tags=(),
                       description="", date=date(2024, 1, 1))
    candidate = make_item(id="b", kind=ItemKind.FOUND, category="phone", color=None,
                          location="Y", tags=(), description="", date=date(2024, 1, 2))

    # Only the date signal (15) fires
    assert compute_matches(target, [candidate]) == []


def test_sorted_by_confidence_with_stable_ties(make_item) -> None:
    target = make_item(id="t", tags=(), description="")
    weak_1 = make_item(id="w1", kind=ItemKind.FOUND, color="red", location="Gym",
                       tags=(), description="")
    strong = make_item(id="s", kind=ItemKind.FOUND, tags=(), description="")
    weak_2 = make_item(id="w2", kind=ItemKind.FOUND, color="blue", location="Gym",
                       tags=(), description="")

    matches = compute_matches(target, [weak_1, strong, weak_2])

    assert [m.candidate_item_id for m in matches] == ["s", "w1", "w2"]
    assert matches[1].confidence == matches[2].confidence == 55


def test_confidence_always_in_range(make_item) -> None:
    target = make_item(id="t")
    pool = [
        make_item(id=f"c{i}", kind=ItemKind.FOUND, category=category, color=color)
        for i, (category, color) in enumerate(
            [("wallet", "black"), ("wallet", None), ("phone", "black"), ("keys", None)]
        )
    ]

    for match in compute_matches(target, pool):
        assert 30 <= match.confidence <= 95
        assert match.candidate_item_id != target.id
