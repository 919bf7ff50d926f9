"""Business logic use cases."""

import logging
import uuid
from dataclasses import replace
from typing import Optional, Sequence, Union

from lost_and_found.core import (
    AnswerScorer,
    ClaimError,
    ClaimRequest,
    ClaimStatus,
    Clock,
    Conversation,
    ConversationStatus,
    ErrorKind,
    InputParser,
    Item,
    ItemKind,
    ItemStatus,
    MatchSuggestion,
    QuizResult,
    Store,
    SystemClock,
    TokenIssuer,
    check_required_answers,
    check_token,
    compute_matches,
    evaluate_quiz,
    generate_choice_quiz,
    generate_questions,
    open_conversation,
    resolve,
    send_message,
)
from lost_and_found.core.conversation import DEFAULT_MAX_MESSAGES

logger = logging.getLogger(__name__)

REVIEWABLE_STATUSES = (ClaimStatus.PENDING, ClaimStatus.FLAGGED)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class PostingService:
    """Service for posting new lost/found reports."""

    def __init__(
        self,
        store: Store,
        token_issuer: TokenIssuer,
        clock: Optional[Clock] = None,
        tokens_expire: bool = True,
        parser: Optional[InputParser] = None,
    ) -> None:
        self.store = store
        self.token_issuer = token_issuer
        self.clock = clock or SystemClock()
        self.tokens_expire = tokens_expire
        self.parser = parser

    def post(self, item: Item, with_token: bool = True) -> Item:
        """Attach a claim token and verification questions, then store the item."""
        if with_token:
            issued = self.token_issuer.issue(with_expiry=self.tokens_expire)
            item = replace(item, claim_token=issued.token, claim_token_expiry=issued.expiry)

        item = replace(
            item,
            verification_questions=tuple(generate_questions(item)),
            created_at=item.created_at or self.clock.now(),
        )
        self.store.save_item(item)
        logger.info("Posted %s item %s (%s)", item.kind.value, item.id, item.category)
        return item

    async def post_report(
        self,
        text: str,
        kind: ItemKind,
        owner_id: Optional[str] = None,
        tags: Sequence[str] = (),
        with_token: bool = True,
    ) -> Item:
        """Parse a one-line report into an item and post it."""
        if self.parser is None:
            raise RuntimeError("No input parser configured")

        parsed = await self.parser.parse(text, self.clock.now().date())
        title = f"{parsed.color.title()} {parsed.item}" if parsed.color else parsed.item.title()
        item = Item(
            id=_new_id(),
            kind=kind,
            category=parsed.category,
            title=title,
            description=parsed.description,
            location=parsed.location,
            color=parsed.color,
            date=parsed.date,
            tags=tuple(tags) or tuple(t for t in (parsed.item, parsed.color) if t),
            owner_id=owner_id,
        )
        return self.post(item, with_token=with_token)


class MatchingService:
    """Service for suggesting matches from the stored item pool."""

    def __init__(self, store: Store) -> None:
        self.store = store

    def suggest(self, item_id: str) -> list[MatchSuggestion]:
        item = self.store.get_item(item_id)
        if item is None:
            logger.warning("Cannot match unknown item %s", item_id)
            return []

        suggestions = compute_matches(item, self.store.list_items())
        logger.info("Found %d match suggestions for %s", len(suggestions), item_id)
        return suggestions


class ClaimService:
    """Service running the token, quiz and validation steps of a claim."""

    def __init__(
        self,
        store: Store,
        scorer: AnswerScorer,
        clock: Optional[Clock] = None,
    ) -> None:
        self.store = store
        self.scorer = scorer
        self.clock = clock or SystemClock()

    def _claimable_item(self, item_id: str) -> Union[Item, ClaimError]:
        item = self.store.get_item(item_id)
        if item is None:
            return ClaimError(ErrorKind.ITEM_NOT_CLAIMABLE, f"Item {item_id} does not exist")
        if item.status != ItemStatus.ACTIVE:
            return ClaimError(
                ErrorKind.ITEM_NOT_CLAIMABLE, f"Item {item_id} is {item.status.value}"
            )
        return item

    async def submit(
        self,
        item_id: str,
        claimant_id: str,
        answers: Sequence[str],
        token: Optional[str] = None,
    ) -> Union[ClaimRequest, ClaimError]:
        """Validate a claim and store it as pending or flagged.

        Low validation scores are not errors: the claim is stored as flagged
        for manual review.
        """
        item = self._claimable_item(item_id)
        if isinstance(item, ClaimError):
            return item

        now = self.clock.now()

        # Items posted without a token skip the token step
        if item.claim_token:
            error = check_token(token, item, now)
            if error:
                logger.info("Claim on %s by %s refused: %s", item_id, claimant_id, error.message)
                return error

        error = check_required_answers(item.verification_questions, answers)
        if error:
            return error

        result = await self.scorer.score(item, answers, now)

        claim = ClaimRequest(
            id=_new_id(),
            item_id=item.id,
            claimant_id=claimant_id,
            claim_token=token,
            answers=tuple(answers),
            status=ClaimStatus.PENDING if result.is_valid else ClaimStatus.FLAGGED,
            validation_score=result.score,
            validation_flags=result.flags,
            created_at=now,
        )

        with self.store.lock(item.id):
            # The item may have been claimed while the answers were scored
            current = self._claimable_item(item.id)
            if isinstance(current, ClaimError):
                return current
            self.store.save_claim(claim)

        logger.info(
            "Claim %s on %s stored as %s (score %d, %d flags)",
            claim.id, item.id, claim.status.value, result.score, len(result.flags),
        )
        return claim

    def review(
        self, claim_id: str, approve: bool, notes: Optional[str] = None
    ) -> Union[ClaimRequest, ClaimError]:
        """Approve or reject a claim and update both users' reputation."""
        claim = self.store.get_claim(claim_id)
        if claim is None:
            return ClaimError(ErrorKind.CLAIM_NOT_FOUND, f"Claim {claim_id} does not exist")

        with self.store.lock(claim.item_id):
            claim = self.store.get_claim(claim_id)
            if claim.status not in REVIEWABLE_STATUSES:
                return ClaimError(
                    ErrorKind.CLAIM_ALREADY_REVIEWED,
                    f"Claim {claim_id} is already {claim.status.value}",
                )

            item = None
            if approve:
                item = self._claimable_item(claim.item_id)
                if isinstance(item, ClaimError):
                    return item

            reviewed = replace(
                claim,
                status=ClaimStatus.APPROVED if approve else ClaimStatus.REJECTED,
                reviewed_at=self.clock.now(),
                review_notes=notes,
            )
            self.store.save_claim(reviewed)

            if item is not None:
                self.store.save_item(replace(item, status=ItemStatus.CLAIMED))
                if item.owner_id:
                    with self.store.lock(f"user:{item.owner_id}"):
                        owner = self.store.get_reputation(item.owner_id)
                        self.store.save_reputation(owner.record_return())

        with self.store.lock(f"user:{claim.claimant_id}"):
            claimant = self.store.get_reputation(claim.claimant_id)
            self.store.save_reputation(claimant.record_claim(approve))

        logger.info("Claim %s %s", claim_id, reviewed.status.value)
        return reviewed

    def quick_quiz(self, item_id: str, answers: Sequence[str]) -> Union[QuizResult, ClaimError]:
        """Evaluate the two-question quick quiz for an item."""
        item = self._claimable_item(item_id)
        if isinstance(item, ClaimError):
            return item
        return evaluate_quiz(generate_choice_quiz(item), answers)


class ConversationService:
    """Service for the lightweight message-based claim path."""

    def __init__(
        self,
        store: Store,
        clock: Optional[Clock] = None,
        max_messages: int = DEFAULT_MAX_MESSAGES,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.max_messages = max_messages

    def send(self, item_id: str, claimant_id: str, text: str) -> Union[Conversation, ClaimError]:
        """Send a message, opening the item's conversation on first use."""
        with self.store.lock(f"conversation:{item_id}"):
            conversation = self.store.get_conversation(item_id)
            if conversation is None:
                conversation = open_conversation(
                    _new_id(), item_id, claimant_id, max_messages=self.max_messages
                )

            updated = send_message(conversation, text, self.clock.now())
            if isinstance(updated, ClaimError):
                return updated

            if updated.effective_status == ConversationStatus.EXPIRED:
                updated = replace(updated, status=ConversationStatus.EXPIRED)
                logger.info("Conversation %s reached its message limit", updated.id)

            self.store.save_conversation(updated)
            return updated

    def resolve(self, item_id: str) -> Union[Conversation, ClaimError]:
        with self.store.lock(f"conversation:{item_id}"):
            conversation = self.store.get_conversation(item_id)
            if conversation is None:
                return ClaimError(
                    ErrorKind.CONVERSATION_NOT_RESOLVABLE,
                    f"No conversation for item {item_id}",
                )

            resolved = resolve(conversation)
            if isinstance(resolved, ClaimError):
                return resolved

            self.store.save_conversation(resolved)
            logger.info("Conversation %s resolved", resolved.id)
            return resolved
