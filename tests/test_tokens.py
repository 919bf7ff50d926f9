"""Tests for claim tokens."""

import random
import re
from datetime import datetime, timedelta, timezone

from lost_and_found.core import ErrorKind, TokenIssuer, check_token, issue_token, validate_token
from lost_and_found.core.tokens import TOKEN_PREFIXES

from conftest import FixedClock

TOKEN_RE = re.compile(r"^[A-Z]{3}-[A-Z0-9]{6}$")


def test_token_format(now: datetime) -> None:
    rng = random.Random(42)
    for _ in range(200):
        issued = issue_token(False, now=now, rng=rng)
        assert TOKEN_RE.match(issued.token)
        assert issued.token.split("-")[0] in TOKEN_PREFIXES
        assert issued.expiry is None


def test_token_expiry(now: datetime) -> None:
    issued = issue_token(True, days=3, now=now, rng=random.Random(1))

    assert issued.expiry == now + timedelta(days=3)
    assert issued.expiry.tzinfo is not None


def test_same_seed_gives_same_token(now: datetime) -> None:
    first = issue_token(True, now=now, rng=random.Random(7))
    second = issue_token(True, now=now, rng=random.Random(7))

    assert first == second


def test_validate_token_without_item_token(make_item, now: datetime) -> None:
    """An item with no token never validates, and this is not an error."""
    assert validate_token("ANY-CODE", make_item(), now) is False


def test_validate_token_requires_expiry(make_item, now: datetime) -> None:
    item = make_item(claim_token="CLM-ABC123")

    assert validate_token("CLM-ABC123", item, now) is False


def test_validate_token(make_item, now: datetime) -> None:
    item = make_item(claim_token="CLM-ABC123", claim_token_expiry=now + timedelta(days=1))

    assert validate_token("CLM-ABC123", item, now) is True
    assert validate_token("CLM-ABC124", item, now) is False
    assert validate_token("CLM-ABC123", item, now + timedelta(days=1)) is False


def test_check_token_distinguishes_expired(make_item, now: datetime) -> None:
    item = make_item(claim_token="CLM-ABC123", claim_token_expiry=now - timedelta(seconds=1))

    assert check_token("CLM-ABC123", item, now).kind == ErrorKind.EXPIRED_TOKEN
    assert check_token("TKN-000000", item, now).kind == ErrorKind.INVALID_TOKEN
    assert check_token(None, item, now).kind == ErrorKind.INVALID_TOKEN


def test_check_token_accepts_valid(make_item, now: datetime) -> None:
    item = make_item(claim_token="CLM-ABC123", claim_token_expiry=now + timedelta(days=7))

    assert check_token("CLM-ABC123", item, now) is None


def test_token_issuer_uses_clock() -> None:
    clock = FixedClock(datetime(2024, 3, 1, tzinfo=timezone.utc))
    issuer = TokenIssuer(clock=clock, rng=random.Random(3), default_days=7)

    issued = issuer.issue()

    assert issued.expiry == datetime(2024, 3, 8, tzinfo=timezone.utc)
    assert issuer.issue(with_expiry=False).expiry is None


def test_check_token_without_expiry(make_item, now: datetime) -> None:
    """Tokens posted without an expiry are accepted on an exact match only."""
    item = make_item(claim_token="CLM-ABC123")

    assert check_token("CLM-ABC123", item, now + timedelta(days=365)) is None
    assert check_token("CLM-ABC124", item, now).kind == ErrorKind.INVALID_TOKEN
    assert check_token(None, item, now).kind == ErrorKind.INVALID_TOKEN
