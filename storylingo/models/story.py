"""Data models for stories, their translations and word lookups."""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class Story:
    """A story in its original language."""

    id: str
    title: str
    original_story: str
    original_language: str
    level: str = "beginner"
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("id")
        return data

    @classmethod
    def from_dict(cls, story_id: str, data: Dict[str, Any]) -> "Story":
        return cls(
            id=story_id,
            title=data.get("title", ""),
            original_story=data.get("original_story", ""),
            original_language=data.get("original_language", ""),
            level=data.get("level", "beginner"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class StoryTranslation:
    """An administrator-provided translation of a story."""

    id: str
    original_id: str
    language: str
    story: str


@dataclass(frozen=True)
class WordSelection:
    """A word clicked in the original panel and its position in the text."""

    word: str
    index: int


@dataclass(frozen=True)
class WordTranslation:
    """On-demand translation of the selected words."""

    original: str
    translated: str
