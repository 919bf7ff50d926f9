"""CLI entry point for the lost & found engine."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from lost_and_found.adapters.llm import ClaudeClient, RuleBasedAnswerScorer, RuleBasedInputParser
from lost_and_found.adapters.storage import YamlStore
from lost_and_found.config import Settings, get_settings
from lost_and_found.core import (
    AnswerScorer,
    ClaimError,
    InputParser,
    ItemKind,
    ItemStatus,
    SystemClock,
    TokenIssuer,
    generate_choice_quiz,
)
from lost_and_found.core.buckets import bucket_counts, trending_tags
from lost_and_found.core.parser import ghost_text
from lost_and_found.core.reputation import progress_to_next_level
from lost_and_found.use_cases import (
    ClaimService,
    ConversationService,
    MatchingService,
    PostingService,
)

app = typer.Typer(help="Match lost and found items and verify ownership claims.")

_state: dict = {}


@app.callback()
def main(
    config: Path = typer.Option(Path("config.yaml"), help="Path to YAML config"),
    debug: bool = typer.Option(False, "--debug", help="Show debug logging"),
) -> None:
    """Lost & found matching and claim verification."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    _state["settings"] = get_settings(config)


def _settings() -> Settings:
    return _state.get("settings") or get_settings()


def _store() -> YamlStore:
    return YamlStore(_settings().data_dir)


def _scorer(settings: Settings) -> AnswerScorer:
    if settings.claims.use_llm_validation and settings.anthropic_api_key:
        return ClaudeClient(settings)
    return RuleBasedAnswerScorer()


def _parser(settings: Settings) -> InputParser:
    if settings.claims.use_llm_validation and settings.anthropic_api_key:
        return ClaudeClient(settings)
    return RuleBasedInputParser()


def _fail(error: ClaimError) -> None:
    print(f"❌ {error.message} [{error.kind.value}]")
    raise typer.Exit(code=1)


@app.command()
def post(
    text: str,
    found: bool = typer.Option(False, "--found", help="Report a found item (default: lost)"),
    owner: Optional[str] = typer.Option(None, help="Poster user id"),
    tag: List[str] = typer.Option([], "--tag", help="Tag, may be repeated"),
    no_token: bool = typer.Option(False, "--no-token", help="Post without a claim token"),
) -> None:
    """Post a report such as "Lost black wallet in cafeteria today"."""
    settings = _settings()
    clock = SystemClock()
    service = PostingService(
        store=_store(),
        token_issuer=TokenIssuer(clock=clock, default_days=settings.claims.token_expiry_days),
        clock=clock,
        tokens_expire=settings.claims.tokens_expire,
        parser=_parser(settings),
    )
    kind = ItemKind.FOUND if found else ItemKind.LOST
    item = asyncio.run(
        service.post_report(text, kind, owner_id=owner, tags=tag, with_token=not no_token)
    )

    print(f"✓ Posted {item.kind.value} item {item.id}")
    print(f"  • {item.title} ({item.category}) at {item.location} on {item.date.isoformat()}")
    if item.claim_token:
        expiry = item.claim_token_expiry.isoformat() if item.claim_token_expiry else "never"
        print(f"  🔑 Claim token: {item.claim_token} (expires {expiry})")
    print("  Verification questions:")
    for question in item.verification_questions:
        marker = "*" if question.is_required else " "
        print(f"   {marker} {question.id}. {question.question}")


@app.command()
def match(item_id: str) -> None:
    """Suggest opposite-kind items that may be the same object."""
    suggestions = MatchingService(_store()).suggest(item_id)
    if not suggestions:
        print("No matches found")
        return

    for suggestion in suggestions:
        print(f"  [{suggestion.confidence}%] {suggestion.candidate_item_id}")
        for reason in suggestion.reasons:
            print(f"     └─ {reason}")


@app.command()
def claim(
    item_id: str,
    claimant: str = typer.Option(..., help="Claimant user id"),
    answer: List[str] = typer.Option([], "--answer", help="Answer, in question order"),
    token: Optional[str] = typer.Option(None, help="Claim token from the poster"),
) -> None:
    """Submit a claim with verification answers."""
    settings = _settings()
    service = ClaimService(_store(), _scorer(settings))
    result = asyncio.run(service.submit(item_id, claimant, answer, token=token))
    if isinstance(result, ClaimError):
        _fail(result)

    print(f"✓ Claim {result.id} stored as {result.status.value}")
    print(f"  • Validation score: {result.validation_score}/100")
    for flag in result.validation_flags:
        print(f"  ⚠️  {flag}")


@app.command()
def quiz(
    item_id: str,
    answer: List[str] = typer.Option([], "--answer", help="Answer, in question order"),
) -> None:
    """Show the quick quiz, or grade it when answers are given."""
    store = _store()
    if not answer:
        item = store.get_item(item_id)
        if item is None:
            print(f"❌ Item {item_id} does not exist")
            raise typer.Exit(code=1)
        for question in generate_choice_quiz(item):
            options = f" [{', '.join(question.options)}]" if question.options else ""
            print(f"  {question.id}. {question.question}{options}")
        return

    result = ClaimService(store, RuleBasedAnswerScorer()).quick_quiz(item_id, answer)
    if isinstance(result, ClaimError):
        _fail(result)
    status = "✓ Passed" if result.passed else "✗ Failed"
    print(f"{status} ({result.correct_count} correct)")


@app.command()
def review(
    claim_id: str,
    approve: bool = typer.Option(..., "--approve/--reject", help="Approve or reject"),
    notes: Optional[str] = typer.Option(None, help="Review notes"),
) -> None:
    """Approve or reject a pending or flagged claim."""
    result = ClaimService(_store(), RuleBasedAnswerScorer()).review(claim_id, approve, notes)
    if isinstance(result, ClaimError):
        _fail(result)
    print(f"✓ Claim {result.id} {result.status.value}")


@app.command()
def message(
    item_id: str,
    text: str,
    claimant: str = typer.Option(..., help="Claimant user id"),
) -> None:
    """Send a message in the item's claim conversation."""
    service = ConversationService(_store(), max_messages=_settings().max_messages)
    result = service.send(item_id, claimant, text)
    if isinstance(result, ClaimError):
        _fail(result)

    last = result.messages[-1]
    print(f"✓ {last.sender_role.value}: {last.text}")
    print(f"  • {result.message_count}/{result.max_messages} messages ({result.effective_status.value})")


@app.command("resolve")
def resolve_conversation(item_id: str) -> None:
    """Mark the item's claim conversation resolved."""
    result = ConversationService(_store()).resolve(item_id)
    if isinstance(result, ClaimError):
        _fail(result)
    print(f"✓ Conversation {result.id} resolved")


@app.command()
def reputation(user_id: str) -> None:
    """Show a user's reputation."""
    record = _store().get_reputation(user_id)
    progress, step = progress_to_next_level(record.score)
    print(f"🏆 {user_id}: {record.score}/100 ({record.level})")
    print(f"  • Successful claims: {record.successful_claims}")
    print(f"  • Failed claims: {record.failed_claims}")
    print(f"  • Items returned: {record.items_returned}")
    print(f"  • Progress: {progress}/{step}")


@app.command()
def buckets() -> None:
    """Count active items per category bucket."""
    items = [item for item in _store().list_items() if item.status == ItemStatus.ACTIVE]
    for bucket in bucket_counts(items):
        print(f"  {bucket.icon} {bucket.name}: {bucket.count}")


@app.command()
def trending(limit: int = 12) -> None:
    """Show the most used tags."""
    for tag in trending_tags(_store().list_items(), SystemClock().now(), limit=limit):
        arrow = {"up": "↑", "down": "↓"}.get(tag.trend, "→")
        print(f"  {arrow} {tag.name} ({tag.count})")


@app.command()
def suggest(partial: str) -> None:
    """Complete the start of a report from the example phrasings."""
    completion = ghost_text(partial)
    if not completion:
        print("No suggestion")
        return
    print(f"💡 {partial}{completion}")


@app.command()
def stats() -> None:
    """Show how many records the store holds."""
    counts = _store().get_stats()
    print(f"📦 Stored records: {counts['total']}")
    for section, count in counts["by_section"].items():
        print(f"  • {section}: {count}")


if __name__ == "__main__":
    app()
