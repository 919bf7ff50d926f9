"""Claim token issuing and checking."""

import random
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

from lost_and_found.core.entities import ClaimError, ErrorKind, IssuedToken, Item
from lost_and_found.core.interfaces import Clock, SystemClock

TOKEN_PREFIXES = ("ITM", "CLM", "TKN", "REF", "VRF", "SEC")
TOKEN_ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 6
DEFAULT_EXPIRY_DAYS = 7


def issue_token(
    with_expiry: bool,
    days: int = DEFAULT_EXPIRY_DAYS,
    *,
    now: datetime,
    rng: random.Random,
) -> IssuedToken:
    """Generate a PREFIX-SUFFIX claim token, optionally expiring after `days`."""
    prefix = rng.choice(TOKEN_PREFIXES)
    suffix = "".join(rng.choice(TOKEN_ALPHABET) for _ in range(SUFFIX_LENGTH))
    expiry = now + timedelta(days=days) if with_expiry else None
    return IssuedToken(token=f"{prefix}-{suffix}", expiry=expiry)


def validate_token(token: str, item: Item, now: datetime) -> bool:
    """True iff the token matches the item's token and has not expired.

    Items without a token or without an expiry never validate; claim flows
    for token-less items skip this check instead of calling it.
    """
    if not item.claim_token or item.claim_token_expiry is None:
        return False
    return token == item.claim_token and now < item.claim_token_expiry


def check_token(token: Optional[str], item: Item, now: datetime) -> Optional[ClaimError]:
    """Explain why a token is refused, or return None if it is accepted.

    Tokens posted without an expiry never expire; they are accepted on an
    exact match.
    """
    if not token or not item.claim_token or token != item.claim_token:
        return ClaimError(ErrorKind.INVALID_TOKEN, "Invalid claim token")

    if item.claim_token_expiry is None or validate_token(token, item, now):
        return None
    return ClaimError(ErrorKind.EXPIRED_TOKEN, "Claim token has expired")


class TokenIssuer:
    """Token issuing bound to a clock and a random source."""

    def __init__(
        self,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        default_days: int = DEFAULT_EXPIRY_DAYS,
    ) -> None:
        self.clock = clock or SystemClock()
        self.rng = rng or secrets.SystemRandom()
        self.default_days = default_days

    def issue(self, with_expiry: bool = True, days: Optional[int] = None) -> IssuedToken:
        return issue_token(
            with_expiry,
            self.default_days if days is None else days,
            now=self.clock.now(),
            rng=self.rng,
        )

    def validate(self, token: str, item: Item) -> bool:
        return validate_token(token, item, self.clock.now())
