"""Session manager tracking readers' open translation panels."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...assistant.session import AssistantClient, AssistantSession
from ...assistant.timers import Scheduler
from ...config import AssistantThresholds
from ...models.story import Story
from ...storage.story_store import LanguageSelection


@dataclass
class SessionEntry:
    """An open translation panel."""
    session_id: str
    user_id: str
    authenticated: bool
    created_at: str
    session: AssistantSession = field(repr=False)


class SessionManager:
    """Creates and looks up assistant sessions by ID."""

    def __init__(self, thresholds: Optional[AssistantThresholds] = None):
        self.thresholds = thresholds or AssistantThresholds()
        self.sessions: dict[str, SessionEntry] = {}

    def create_session(
        self,
        story: Story,
        user_id: str,
        authenticated: bool,
        assistant: AssistantClient,
        scheduler: Scheduler,
        translation_language: str = "en",
    ) -> SessionEntry:
        """Open a new session for a reader and story."""
        session_id = str(uuid.uuid4())
        languages = LanguageSelection(
            story.original_language,
            translation_language=translation_language,
            user_language=translation_language,
        )
        entry = SessionEntry(
            session_id=session_id,
            user_id=user_id,
            authenticated=authenticated,
            created_at=datetime.now().isoformat(),
            session=AssistantSession(
                story,
                assistant,
                scheduler,
                languages=languages,
                thresholds=self.thresholds,
            ),
        )
        self.sessions[session_id] = entry
        return entry

    def get_session(self, session_id: str) -> Optional[SessionEntry]:
        """Get a session by ID."""
        return self.sessions.get(session_id)

    def close_session(self, session_id: str) -> bool:
        """Close a session, dropping any pending assessment."""
        entry = self.sessions.pop(session_id, None)
        if entry is None:
            return False
        entry.session.disable_ai()
        return True
