"""Storage of stories and their administrator-provided translations."""

from typing import List, Optional

from ..config import LANGUAGE_NAMES
from ..log import get_logger
from ..models.draft import utc_now_iso
from ..models.story import Story, StoryTranslation
from .document_store import MemoryDocumentStore

logger = get_logger("storylingo.stories")

STORIES_PATH = "stories"
TRANSLATIONS_PATH = "translations"

TRANSLATION_NOT_AVAILABLE = "Translation not available for this language"


class StoryStore:
    """CRUD access to stories and lookup of their translations."""

    def __init__(self, documents: MemoryDocumentStore):
        self.documents = documents

    def create_story(
        self,
        title: str,
        original_story: str,
        original_language: str,
        level: str = "beginner",
    ) -> Story:
        now = utc_now_iso()
        story = Story(
            id="",
            title=title,
            original_story=original_story,
            original_language=original_language,
            level=level,
            created_at=now,
            updated_at=now,
        )
        story.id = self.documents.push(STORIES_PATH, story.to_dict())
        logger.info("Story created", extra={"component": "stories", "story_id": story.id})
        return story

    def get_story(self, story_id: str) -> Optional[Story]:
        data = self.documents.get(f"{STORIES_PATH}/{story_id}")
        if not isinstance(data, dict):
            return None
        return Story.from_dict(story_id, data)

    def list_stories(self) -> List[Story]:
        """All stories, newest first."""
        stories = [
            Story.from_dict(key, data)
            for key, data in self.documents.children(STORIES_PATH).items()
        ]
        stories.sort(key=lambda s: s.created_at, reverse=True)
        return stories

    def delete_story(self, story_id: str) -> bool:
        """Delete a story together with its translations."""
        for key in self.documents.query(TRANSLATIONS_PATH, "original_id", story_id):
            self.documents.delete(f"{TRANSLATIONS_PATH}/{key}")
        return self.documents.delete(f"{STORIES_PATH}/{story_id}")

    def add_translation(self, story_id: str, language: str, text: str) -> StoryTranslation:
        data = {"original_id": story_id, "language": language, "story": text}
        key = self.documents.push(TRANSLATIONS_PATH, data)
        return StoryTranslation(id=key, original_id=story_id, language=language, story=text)

    def get_translation(self, story_id: str, language: str) -> Optional[StoryTranslation]:
        """Find the translation of a story into ``language``, if any."""
        matches = self.documents.query(TRANSLATIONS_PATH, "original_id", story_id)
        for key, data in matches.items():
            if data.get("language") == language:
                return StoryTranslation(
                    id=key,
                    original_id=story_id,
                    language=language,
                    story=data.get("story", ""),
                )
        return None


class LanguageSelection:
    """
    Languages shown in the original panel and used for the reader's translation.

    The translation language never equals the language currently displayed
    as the original: translations always go *into* another language.
    """

    def __init__(
        self,
        original_language: str,
        translation_language: str = "en",
        user_language: str = "en",
        supported_languages: Optional[List[str]] = None,
    ):
        self.story_language = original_language
        self.original_language = original_language
        self.user_language = user_language
        self.supported_languages = supported_languages or list(LANGUAGE_NAMES)
        self.translation_language = translation_language
        if translation_language == original_language:
            self.translation_language = self._fallback_translation_language()

    def select_original(self, language: str) -> None:
        """Display the story in ``language``, moving the translation language if it collides."""
        if language == self.original_language:
            return
        self.original_language = language
        if self.translation_language == language:
            self.translation_language = self._fallback_translation_language()

    def select_translation(self, language: str) -> bool:
        """Change the translation language. Refuses the displayed original language."""
        if language == self.original_language:
            return False
        self.translation_language = language
        return True

    def original_text(self, story: Story, stories: StoryStore) -> str:
        """Text to show in the original panel for the current selection."""
        if self.original_language == self.story_language:
            return story.original_story
        translation = stories.get_translation(story.id, self.original_language)
        if translation is None:
            return TRANSLATION_NOT_AVAILABLE
        return translation.story

    def _fallback_translation_language(self) -> str:
        if self.user_language != self.original_language:
            return self.user_language
        for code in self.supported_languages:
            if code != self.original_language:
                return code
        raise ValueError("No translation language available")
