"""Deterministic stand-ins for the model-backed scorer and parser."""

from datetime import date, datetime
from typing import Sequence

from lost_and_found.core import AnswerScorer, InputParser, Item, ParsedInput, ValidationResult
from lost_and_found.core.parser import parse_smart_input
from lost_and_found.core.validation import score_answers


class RuleBasedAnswerScorer(AnswerScorer):
    """Score answers with the keyword heuristics."""

    async def score(
        self, item: Item, answers: Sequence[str], now: datetime
    ) -> ValidationResult:
        return score_answers(item, answers, now)


class RuleBasedInputParser(InputParser):
    """Parse reports with keyword patterns."""

    async def parse(self, text: str, today: date) -> ParsedInput:
        return parse_smart_input(text, today)
