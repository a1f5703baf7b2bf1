"""Decides, keystroke by keystroke, whether and when to assess a translation."""

from enum import Enum
from typing import Callable, Optional

from ..config import AssistantThresholds
from . import heuristics
from .timers import Debouncer, Scheduler


class TriggerDecision(str, Enum):
    """Outcome of running a text change through the assessment gates."""
    ASSESS = "assess"
    DISABLED = "disabled"  # AI mode is off
    UNCHANGED = "unchanged"  # blank, or identical to the last assessed text
    NOT_AT_BOUNDARY = "not_at_boundary"  # last keystroke did not close a clause
    INCOMPLETE = "incomplete"  # no terminator and no significant change
    TOO_SHORT = "too_short"  # too short against the original's first sentence


def evaluate_gates(
    text: str,
    original_text: str,
    last_assessed: str,
    ai_enabled: bool,
    thresholds: AssistantThresholds,
) -> TriggerDecision:
    """Run a text change through gates 1-5."""
    if not ai_enabled:
        return TriggerDecision.DISABLED
    if not text.strip() or text == last_assessed:
        return TriggerDecision.UNCHANGED
    if not heuristics.last_char_is_terminator(text):
        return TriggerDecision.NOT_AT_BOUNDARY

    complete = heuristics.ends_with_terminator(text)
    significant = heuristics.is_significant_change(
        text, last_assessed, thresholds.significant_change_delta
    )
    if not complete and not significant:
        return TriggerDecision.INCOMPLETE

    if heuristics.is_too_short(text, original_text, thresholds):
        return TriggerDecision.TOO_SHORT

    return TriggerDecision.ASSESS


class AssessmentTrigger:
    """
    Gatekeeper in front of the assessment client.

    Gates, in order:
    1. AI mode must be enabled
    2. Text must be non-blank and differ from the last assessed text
    3. The last keystroke must be one of ``. ! ? ,``
    4. Text must end with a terminator or differ significantly from the last
       assessed text
    5. Text must not be too short for the original's first sentence
    6. Debounce: the call fires once the input has been quiet for
       ``debounce_seconds``; each new qualifying change restarts the timer
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_fire: Callable[[str], None],
        thresholds: Optional[AssistantThresholds] = None,
    ):
        """
        Args:
            scheduler: Source of cancellable timers
            on_fire: Called with the text once the debounce period elapses
            thresholds: Heuristic constants (defaults if not provided)
        """
        self.thresholds = thresholds or AssistantThresholds()
        self.on_fire = on_fire
        self.debouncer = Debouncer(scheduler, self.thresholds.debounce_seconds)

    @property
    def pending(self) -> bool:
        return self.debouncer.pending

    def evaluate(
        self,
        text: str,
        original_text: str,
        last_assessed: str,
        ai_enabled: bool,
    ) -> TriggerDecision:
        """Run gates 1-5 without scheduling anything."""
        return evaluate_gates(text, original_text, last_assessed, ai_enabled, self.thresholds)

    def on_text_change(
        self,
        text: str,
        original_text: str,
        last_assessed: str,
        ai_enabled: bool,
    ) -> TriggerDecision:
        """Evaluate a text change and (re)start the debounce timer when it qualifies."""
        decision = self.evaluate(text, original_text, last_assessed, ai_enabled)
        if decision is TriggerDecision.ASSESS:
            self.debouncer.submit(lambda: self.on_fire(text))
        return decision

    def cancel(self) -> None:
        self.debouncer.cancel()
