"""Persistence for stories, translations and drafts."""

from .document_store import MemoryDocumentStore, JsonFileDocumentStore
from .draft_store import DraftStore, sanitize_user_id, anonymous_user_id
from .story_store import StoryStore, LanguageSelection

__all__ = [
    "MemoryDocumentStore",
    "JsonFileDocumentStore",
    "DraftStore",
    "sanitize_user_id",
    "anonymous_user_id",
    "StoryStore",
    "LanguageSelection",
]
