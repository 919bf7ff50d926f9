"""Test configuration and common fixtures."""

from datetime import date, datetime, timezone
from typing import Any, Callable

import pytest

from lost_and_found.core import Item, ItemKind

NOW = datetime(2024, 1, 16, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock frozen at a given time."""

    def __init__(self, now: datetime = NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_item() -> Callable[..., Item]:
    """Build items with sensible defaults."""

    def _make(**overrides: Any) -> Item:
        fields: dict[str, Any] = {
            "id": "item-1",
            "kind": ItemKind.LOST,
            "category": "wallet",
            "title": "Black Leather Wallet",
            "description": "Black leather wallet with credit cards inside",
            "location": "Library",
            "color": "black",
            "date": date(2024, 1, 15),
            "tags": ("wallet", "leather"),
        }
        fields.update(overrides)
        return Item(**fields)

    return _make
