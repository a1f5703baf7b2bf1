"""Per-reader AI assistant session for one story's translation panel."""

import threading
from typing import List, Optional, Protocol

from ..config import AssistantThresholds
from ..log import get_logger
from ..models.assessment import AssessmentResult, AssistantState, Notice
from ..models.draft import TranslationDraft
from ..models.story import Story
from ..storage.draft_store import DraftStore
from ..storage.story_store import LanguageSelection
from . import heuristics
from .reconcile import Reconciliation, reconcile
from .timers import Scheduler, TimerHandle
from .trigger import AssessmentTrigger, TriggerDecision

logger = get_logger("storylingo.assistant")

LOGIN_REQUIRED = Notice(
    "Login Required",
    "You need to be logged in to use AI mode.",
)
AI_MODE_ENABLED = Notice(
    "AI Mode Enabled",
    "Translations will be automatically assessed after you type a period, "
    "comma, question mark, or exclamation mark.",
)
INCOMPLETE_TRANSLATION = Notice(
    "Incomplete Translation",
    "Please complete at least one full sentence ending with a period, question "
    "mark, or exclamation point before requesting alternatives.",
)
NO_ALTERNATIVES = Notice(
    "No Alternatives Available",
    "Our AI couldn't generate good alternatives for your translation. This could "
    "be because your translation is already good or the text is too short.",
)


class AssistantClient(Protocol):
    def assess_translation(
        self, original_text: str, user_translation: str, source_lang: str, target_lang: str
    ) -> AssessmentResult: ...

    def get_alternative_translations(
        self, original_text: str, user_translation: str, source_lang: str, target_lang: str
    ) -> List[str]: ...


class AssistantSession:
    """
    Editing state of one reader translating one story.

    Keystrokes go through ``set_text``; the assessment trigger decides when
    the assistant client is called and ``reconcile`` decides what reaches the
    panel. Every assessment and alternatives request carries a sequence
    number, and only the response to the newest request of its kind is
    applied, so a slow response can never overwrite a newer one.
    """

    def __init__(
        self,
        story: Story,
        assistant: AssistantClient,
        scheduler: Scheduler,
        languages: Optional[LanguageSelection] = None,
        thresholds: Optional[AssistantThresholds] = None,
    ):
        self.story = story
        self.assistant = assistant
        self.scheduler = scheduler
        self.languages = languages or LanguageSelection(story.original_language)
        self.thresholds = thresholds or AssistantThresholds()
        self.trigger = AssessmentTrigger(scheduler, self._on_debounced, self.thresholds)

        self._lock = threading.RLock()
        self._state = AssistantState()
        self._assess_seq = 0
        self._alternatives_seq = 0
        self._enable_check: Optional[TimerHandle] = None

    @property
    def state(self) -> AssistantState:
        """Snapshot of what the assistant panel shows."""
        with self._lock:
            return AssistantState(**{
                **vars(self._state),
                "alternatives": list(self._state.alternatives),
            })

    @property
    def text(self) -> str:
        return self._state.text

    @property
    def target_language(self) -> str:
        return self.languages.translation_language

    # Typing

    def set_text(self, text: str) -> TriggerDecision:
        """Record a text change and let the trigger decide whether to assess."""
        with self._lock:
            self._state.text = text
            return self.trigger.on_text_change(
                text,
                self.story.original_story,
                self._state.last_assessed_text,
                self._state.ai_enabled,
            )

    def _on_debounced(self, text: str) -> None:
        with self._lock:
            # AI mode or the last assessed text may have changed while waiting
            if not self._state.ai_enabled or text == self._state.last_assessed_text:
                return
        self._assess(text)

    # AI mode

    def enable_ai(self, authenticated: bool = True) -> Notice:
        """Switch AI mode on; anonymous readers are refused."""
        if not authenticated:
            return LOGIN_REQUIRED

        with self._lock:
            self._state.ai_enabled = True
            text = self._state.text
            if heuristics.has_assessable_content(text):
                self._state.alternatives = []
                self._cancel_enable_check()
                self._enable_check = self.scheduler.call_later(
                    self.thresholds.enable_check_delay,
                    lambda: self._run_enable_check(text),
                )
        return AI_MODE_ENABLED

    def disable_ai(self) -> None:
        with self._lock:
            self._state.ai_enabled = False
            self.trigger.cancel()
            self._cancel_enable_check()

    def _run_enable_check(self, text: str) -> None:
        with self._lock:
            self._enable_check = None
            if not self._state.ai_enabled:
                return
        self._assess(text)

    def _cancel_enable_check(self) -> None:
        if self._enable_check is not None:
            self._enable_check.cancel()
            self._enable_check = None

    # Assessment

    def refresh_assessment(self) -> Optional[Reconciliation]:
        """Assess the current text now, skipping the cadence, completeness and debounce gates."""
        with self._lock:
            text = self._state.text
        if not text.strip():
            return None
        return self._assess(text)

    def _assess(self, text: str) -> Optional[Reconciliation]:
        """Call the assistant and apply its answer unless a newer request superseded it."""
        with self._lock:
            self._assess_seq += 1
            seq = self._assess_seq
            self._state.last_assessed_text = text
            self._state.is_assessing = True
            target_lang = self.target_language

        try:
            result = self.assistant.assess_translation(
                self.story.original_story,
                text,
                self.story.original_language,
                target_lang,
            )
        except Exception:
            logger.exception("Assessment call failed", extra={"component": "assistant", "story_id": self.story.id})
            result = AssessmentResult.failed()

        with self._lock:
            if seq != self._assess_seq:
                logger.info("Discarding stale assessment", extra={"component": "assistant", "seq": seq})
                return None

            outcome = reconcile(result, text, self.thresholds)
            self._state.score = outcome.score
            self._state.feedback = outcome.feedback
            self._state.has_improved_translation = outcome.has_improved_translation
            self._state.improved_translation = outcome.improved_translation
            self._state.is_assessing = False
            return outcome

    def apply_improved_translation(self) -> bool:
        """Replace the working text with the offered improved translation."""
        with self._lock:
            suggestion = self._state.improved_translation
            if not self._state.has_improved_translation or suggestion is None:
                return False
            self._replace_text(suggestion)
            self._state.has_improved_translation = False
            self._state.improved_translation = None
            return True

    # Alternatives

    def request_alternatives(self) -> Optional[Notice]:
        """
        Fetch alternative phrasings of the current text.

        Returns:
            A notice when the text is not a full sentence yet or no
            alternatives came back; None otherwise
        """
        with self._lock:
            text = self._state.text
            if not text.strip():
                return None
            if not heuristics.can_request_alternatives(text):
                return INCOMPLETE_TRANSLATION
            self._alternatives_seq += 1
            seq = self._alternatives_seq
            self._state.is_loading_alternatives = True
            target_lang = self.target_language

        try:
            alternatives = self.assistant.get_alternative_translations(
                self.story.original_story,
                text,
                self.story.original_language,
                target_lang,
            )
        except Exception:
            logger.exception("Alternatives call failed", extra={"component": "assistant", "story_id": self.story.id})
            alternatives = []

        alternatives = list(alternatives)[: self.thresholds.max_alternatives]

        with self._lock:
            if seq != self._alternatives_seq:
                return None
            self._state.alternatives = alternatives
            self._state.is_loading_alternatives = False

        logger.info("Alternatives received", extra={"component": "assistant", "count": len(alternatives)})
        if not alternatives:
            return NO_ALTERNATIVES
        return None

    def apply_alternative(self, index: int) -> bool:
        """Replace the working text with one of the offered alternatives."""
        with self._lock:
            if not 0 <= index < len(self._state.alternatives):
                return False
            self._replace_text(self._state.alternatives[index])
            return True

    def _replace_text(self, text: str) -> None:
        # Applied text counts as assessed so it is not sent straight back
        self.trigger.cancel()
        self._state.text = text
        self._state.last_assessed_text = text

    # Languages

    def select_languages(
        self,
        original_language: Optional[str] = None,
        translation_language: Optional[str] = None,
    ) -> bool:
        """
        Switch the displayed original and/or the translation language.

        Returns:
            False if the requested translation language is the displayed original
        """
        with self._lock:
            displayed = original_language or self.languages.original_language
            if translation_language and translation_language == displayed:
                return False
            if original_language:
                self.languages.select_original(original_language)
            if translation_language:
                self.languages.select_translation(translation_language)
            return True

    # Drafts

    def save_draft(self, drafts: DraftStore, user_id: str) -> Optional[TranslationDraft]:
        """Save the working text as a new draft in the current translation language."""
        with self._lock:
            text = self._state.text
        if not text.strip():
            return None
        if self.target_language == self.languages.original_language:
            raise ValueError("Translation language must differ from the displayed original language")
        return drafts.create(self.story.id, user_id, text, self.target_language)

    def load_draft(self, draft: TranslationDraft) -> None:
        """Put a saved draft back into the editor, following its language when allowed."""
        with self._lock:
            self.trigger.cancel()
            self._state.text = draft.content
        if draft.language and draft.language != self.target_language:
            self.languages.select_translation(draft.language)
