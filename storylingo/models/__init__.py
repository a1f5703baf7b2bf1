"""Data models for StoryLingo."""

from .draft import TranslationDraft
from .assessment import AssessmentResult, AssistantState, Notice
from .story import Story, StoryTranslation, WordSelection, WordTranslation

__all__ = [
    "TranslationDraft",
    "AssessmentResult",
    "AssistantState",
    "Notice",
    "Story",
    "StoryTranslation",
    "WordSelection",
    "WordTranslation",
]
