"""Configuration management for the StoryLingo backend."""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List
from dotenv import load_dotenv

load_dotenv()


# Language display names (for prompts and the language pickers)
LANGUAGE_NAMES = {
    "en": "English",
    "tr": "Turkish",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "ro": "Romanian",
    "pt": "Portuguese",
    "ru": "Russian",
}


@dataclass
class AssistantThresholds:
    """Heuristic constants for the AI assistant."""

    min_assess_length: int = 10
    min_first_sentence_ratio: float = 0.4
    max_suggestion_ratio: float = 1.5
    significant_change_delta: int = 15
    debounce_seconds: float = 1.0
    max_alternatives: int = 2
    # Delay of the one-time check performed when AI mode is switched on
    enable_check_delay: float = 0.1


@dataclass
class Config:
    """Application configuration."""

    # API Keys
    openai_api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    deepl_api_key: str = field(default_factory=lambda: os.getenv("DEEPL_API_KEY", ""))

    # Storage
    data_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("STORYLINGO_DATA_DIR", str(Path(tempfile.gettempdir()) / "storylingo"))
        )
    )

    # OpenAI model settings
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o-mini"))
    assessment_temperature: float = 0.3
    alternatives_temperature: float = 0.7
    max_tokens: int = 500

    thresholds: AssistantThresholds = field(default_factory=AssistantThresholds)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.openai_api_key:
            errors.append("OPENAI_API_KEY is not set")
        if not self.deepl_api_key:
            errors.append("DEEPL_API_KEY is not set")
        return errors


# Global config instance
config = Config()
