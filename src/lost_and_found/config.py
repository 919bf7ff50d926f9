"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class ClaudeConfig:
    """Claude API settings."""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    temperature: float = 0.0
    max_retries: int = 5
    initial_retry_delay: float = 2.0
    request_delay: float = 1.5


@dataclass
class PathsConfig:
    """Path settings."""
    data_dir: Path = Path("data")


@dataclass
class ClaimsConfig:
    """Claim token and validation settings."""
    token_expiry_days: int = 7
    tokens_expire: bool = True
    use_llm_validation: bool = False


@dataclass
class ConversationConfig:
    """Claim conversation settings."""
    max_messages: int = 5


@dataclass
class PromptsConfig:
    """Prompts for LLM."""
    answer_scoring: dict = field(default_factory=lambda: {
        "system": (
            "You verify ownership claims for a lost and found service. "
            "Reply with JSON only: "
            '{"score": <0-100>, "flags": ["<concern>", ...]}'
        ),
        "user": (
            "Item: {title}\nCategory: {category}\nColor: {color}\n"
            "Location: {location}\nDate: {date}\nTags: {tags}\n"
            "Description: {description}\n\n"
            "Questions and answers:\n{qa}"
        ),
    })
    input_parsing: dict = field(default_factory=lambda: {
        "system": (
            "You extract structured fields from lost and found reports. "
            "Reply with JSON only: "
            '{"item": "", "category": "", "color": null, "location": "", '
            '"date": "YYYY-MM-DD"}'
        ),
        "user": "Today is {today}.\nReport: {text}",
    })


@dataclass
class Settings:
    """Application settings."""

    # API Keys (from environment only)
    anthropic_api_key: str = ""

    # Config sections
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    claims: ClaimsConfig = field(default_factory=ClaimsConfig)
    conversation: ConversationConfig = field(default_factory=ConversationConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)

    @property
    def claude_model(self) -> str:
        return self.claude.model

    @property
    def claude_max_tokens(self) -> int:
        return self.claude.max_tokens

    @property
    def claude_temperature(self) -> float:
        return self.claude.temperature

    @property
    def claude_max_retries(self) -> int:
        return self.claude.max_retries

    @property
    def claude_initial_retry_delay(self) -> float:
        return self.claude.initial_retry_delay

    @property
    def claude_request_delay(self) -> float:
        return self.claude.request_delay

    @property
    def data_dir(self) -> Path:
        return self.paths.data_dir

    @property
    def max_messages(self) -> int:
        return self.conversation.max_messages


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
    )

    if "claude" in config:
        for key, value in config["claude"].items():
            setattr(settings.claude, key, value)

    if "paths" in config:
        for key, value in config["paths"].items():
            setattr(settings.paths, key, Path(value))

    if "claims" in config:
        for key, value in config["claims"].items():
            setattr(settings.claims, key, value)

    if "conversation" in config:
        for key, value in config["conversation"].items():
            setattr(settings.conversation, key, value)

    if "prompts" in config:
        settings.prompts = PromptsConfig(**config["prompts"])

    return settings
