"""Claude API client for answer scoring and report parsing."""

import asyncio
import json
import logging
import re
from datetime import date, datetime
from typing import Sequence

import httpx

from lost_and_found.config import Settings
from lost_and_found.core import (
    AnswerScorer,
    InputParser,
    Item,
    ParsedInput,
    ValidationResult,
)
from lost_and_found.core.parser import parse_smart_input
from lost_and_found.core.validation import is_valid_verdict

logger = logging.getLogger(__name__)

UNPARSED_FLAG = "Validation response could not be parsed"


class ClaudeClient(AnswerScorer, InputParser):
    """Claude API client implementation."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.api_key = settings.anthropic_api_key
        self.model = settings.claude_model
        self.max_tokens = settings.claude_max_tokens
        self.temperature = settings.claude_temperature
        self.base_url = "https://api.anthropic.com/v1"
        self.max_retries = settings.claude_max_retries
        self.initial_retry_delay = settings.claude_initial_retry_delay
        self.request_delay = settings.claude_request_delay
        self._last_request_time = 0.0

    async def score(
        self, item: Item, answers: Sequence[str], now: datetime
    ) -> ValidationResult:
        """Ask Claude to score the answers.

        The verdict is recomputed locally from the returned score and flags,
        so a model reply can never break the score/is_valid contract. An
        unreadable reply yields a zero score that routes the claim to manual
        review.
        """
        prompt_template = self.settings.prompts.answer_scoring.get("user", "")
        system_prompt = self.settings.prompts.answer_scoring.get("system", "")

        qa_lines = []
        for index, answer in enumerate(answers):
            if index < len(item.verification_questions):
                question = item.verification_questions[index].question
            else:
                question = "(additional answer)"
            qa_lines.append(f"Q{index + 1}: {question}\nA{index + 1}: {answer}")

        prompt = prompt_template.format(
            title=item.title,
            category=item.category,
            color=item.color or "unknown",
            location=item.location or "unknown",
            date=item.date.isoformat(),
            tags=", ".join(item.tags),
            description=item.description,
            qa="\n".join(qa_lines),
            today=now.date().isoformat(),
        )

        response = await self._call_api(prompt=prompt, system=system_prompt)
        json_text = self._extract_json(response)

        try:
            result = json.loads(json_text)
            score = max(0, min(100, int(result["score"])))
            flags = tuple(str(flag) for flag in result.get("flags", []))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(
                "Claude returned an unreadable scoring reply (%s: %s): %s",
                type(e).__name__, e, response[:250],
            )
            return ValidationResult(score=0, flags=(UNPARSED_FLAG,), is_valid=False)

        return ValidationResult(score=score, flags=flags, is_valid=is_valid_verdict(score, flags))

    async def parse(self, text: str, today: date) -> ParsedInput:
        """Ask Claude to extract item fields, falling back to keyword rules."""
        prompt_template = self.settings.prompts.input_parsing.get("user", "")
        system_prompt = self.settings.prompts.input_parsing.get("system", "")

        prompt = prompt_template.format(text=text, today=today.isoformat())
        response = await self._call_api(prompt=prompt, system=system_prompt)
        json_text = self._extract_json(response)

        fallback = parse_smart_input(text, today)
        try:
            data = json.loads(json_text)
            reported = date.fromisoformat(data["date"]) if data.get("date") else fallback.date
            return ParsedInput(
                item=data.get("item") or fallback.item,
                category=data.get("category") or fallback.category,
                color=data.get("color") or None,
                location=data.get("location") or fallback.location,
                date=reported,
                description=text,
            )
        except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Claude returned an unreadable parsing reply, using rules: %s", e)
            return fallback

    async def _call_api(self, prompt: str, system: str) -> str:
        """Call Claude API with retry logic and rate limiting."""
        # Rate limiting: ensure minimum delay between requests
        current_time = asyncio.get_running_loop().time()
        time_since_last_request = current_time - self._last_request_time
        if time_since_last_request < self.request_delay:
            await asyncio.sleep(self.request_delay - time_since_last_request)

        last_exception = None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(timeout=60.0) as client:
                    response = await client.post(
                        f"{self.base_url}/messages",
                        headers={
                            "x-api-key": self.api_key,
                            "anthropic-version": "2023-06-01",
                            "content-type": "application/json",
                        },
                        json={
                            "model": self.model,
                            "max_tokens": self.max_tokens,
                            "temperature": self.temperature,
                            "system": system,
                            "messages": [
                                {"role": "user", "content": prompt}
                            ],
                        },
                    )

                    self._last_request_time = asyncio.get_running_loop().time()

                    if response.status_code == 200:
                        data = response.json()
                        return data["content"][0]["text"]

                    # Rate limit - retry with backoff
                    if response.status_code == 429:
                        retry_after = self._get_retry_delay(response, attempt)
                        logger.info(
                            "Rate limit hit, retrying after %.1fs (attempt %d/%d)",
                            retry_after, attempt + 1, self.max_retries,
                        )
                        await asyncio.sleep(retry_after)
                        continue

                    # Server errors - retry with backoff
                    if response.status_code >= 500:
                        retry_delay = self.initial_retry_delay * (2 ** attempt)
                        logger.warning(
                            "Server error %d, retrying after %.1fs",
                            response.status_code, retry_delay,
                        )
                        await asyncio.sleep(retry_delay)
                        continue

                    # Other errors - raise immediately
                    response.raise_for_status()

            except httpx.HTTPStatusError as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    retry_delay = self.initial_retry_delay * (2 ** attempt)
                    logger.warning("HTTP error, retrying after %.1fs", retry_delay)
                    await asyncio.sleep(retry_delay)
                    continue
                raise
            except httpx.RequestError as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    retry_delay = self.initial_retry_delay * (2 ** attempt)
                    logger.warning("Network error, retrying after %.1fs", retry_delay)
                    await asyncio.sleep(retry_delay)
                    continue
                raise

        if last_exception:
            raise last_exception
        raise RuntimeError("Failed to call API after all retries")

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Calculate retry delay from response headers or use exponential backoff."""
        retry_after = response.headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        return self.initial_retry_delay * (2 ** attempt)

    def _fix_json(self, text: str) -> str:
        """Try to fix common JSON issues."""
        # Remove trailing commas before } or ]
        return re.sub(r",(\s*[}\]])", r"\1", text)

    def _extract_json(self, text: str) -> str:
        """Extract JSON from markdown code block or raw text."""
        code_block_match = re.search(r"```(?:json)?\s*\n(.*?)\n```", text, re.DOTALL)
        if code_block_match:
            return self._fix_json(code_block_match.group(1).strip())

        # Prefer an object carrying the score field the scorer needs
        json_with_score = re.search(r'\{[^{}]*"score"\s*:\s*\d+[^{}]*\}', text, re.DOTALL)
        if json_with_score:
            candidate = self._fix_json(json_with_score.group(0))
            try:
                json.loads(candidate)
                return candidate
            except json.JSONDecodeError:
                pass

        json_object_match = re.search(r"\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}", text, re.DOTALL)
        if json_object_match:
            candidate = self._fix_json(json_object_match.group(0))
            try:
                json.loads(candidate)
                return candidate
            except json.JSONDecodeError:
                pass

        return self._fix_json(text.strip())
