"""Answer scoring and report parsing adapters."""

from lost_and_found.adapters.llm.claude_client import ClaudeClient
from lost_and_found.adapters.llm.rule_based import RuleBasedAnswerScorer, RuleBasedInputParser

__all__ = ["ClaudeClient", "RuleBasedAnswerScorer", "RuleBasedInputParser"]
