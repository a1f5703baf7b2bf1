"""Storage of readers' saved translation drafts."""

import re
from typing import List, Optional

from ..log import get_logger
from ..models.draft import TranslationDraft, utc_now_iso
from .document_store import MemoryDocumentStore

logger = get_logger("storylingo.drafts")

TRANSLATION_DRAFTS_PATH = "translation_drafts"

# Characters the document store does not accept in a path segment
_RESERVED_CHARS = re.compile(r"[.#$\[\]]")


def sanitize_user_id(user_id: str) -> str:
    """Make a user id (usually an email address) safe as a path segment.

    Distinct ids can collapse to the same key ("a.b" and "a#b"); such ids
    share one set of drafts.
    """
    return _RESERVED_CHARS.sub("_", user_id)


def anonymous_user_id(client_ip: str) -> str:
    """Pseudonymous id for a reader who is not logged in."""
    return f"anonymous_{client_ip.replace('.', '_')}"


class DraftStore:
    """
    Append-only record of translation drafts per (story, user).

    Drafts are never edited in place: saving again always creates a new
    draft, and a draft only disappears through ``delete``.
    """

    def __init__(self, documents: MemoryDocumentStore):
        self.documents = documents

    def create(
        self,
        story_id: str,
        user_id: str,
        content: str,
        language: str,
        date: Optional[str] = None,
    ) -> TranslationDraft:
        """
        Save a new draft.

        Args:
            story_id: Story the translation belongs to
            user_id: Raw user id (email or anonymous id)
            content: The reader's translation
            language: Language the story was translated into
            date: ISO-8601 timestamp (defaults to now)

        Returns:
            The stored draft with its generated id
        """
        draft_data = {
            "content": content,
            "language": language,
            "date": date or utc_now_iso(),
        }
        draft_id = self.documents.push(self._drafts_path(story_id, user_id), draft_data)
        logger.info("Draft saved", extra={"component": "drafts", "story_id": story_id})
        return TranslationDraft.from_dict(draft_id, draft_data)

    def list(self, story_id: str, user_id: str) -> List[TranslationDraft]:
        """All drafts for (story, user), newest first."""
        children = self.documents.children(self._drafts_path(story_id, user_id))
        drafts = [TranslationDraft.from_dict(key, data) for key, data in children.items()]
        # Keys are time-ordered, so they break ties between equal dates
        drafts.sort(key=lambda d: (d.timestamp, d.id), reverse=True)
        return drafts

    def get(self, story_id: str, user_id: str, draft_id: str) -> Optional[TranslationDraft]:
        """Get a single draft, or None if it does not exist."""
        data = self.documents.get(self._draft_path(story_id, user_id, draft_id))
        if not isinstance(data, dict):
            return None
        return TranslationDraft.from_dict(draft_id, data)

    def delete(self, story_id: str, user_id: str, draft_id: str) -> None:
        """Delete a draft. Deleting a missing draft does nothing."""
        if self.documents.delete(self._draft_path(story_id, user_id, draft_id)):
            logger.info("Draft deleted", extra={"component": "drafts", "story_id": story_id})

    def _drafts_path(self, story_id: str, user_id: str) -> str:
        return f"{TRANSLATION_DRAFTS_PATH}/{sanitize_user_id(user_id)}/{story_id}"

    def _draft_path(self, story_id: str, user_id: str, draft_id: str) -> str:
        return f"{self._drafts_path(story_id, user_id)}/{draft_id}"
