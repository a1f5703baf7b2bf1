"""Turns a raw assessment into what the assistant panel shows."""

from dataclasses import dataclass
from typing import Optional

from ..config import AssistantThresholds
from ..models.assessment import AssessmentResult
from .heuristics import has_complete_thought, is_reasonable_length


@dataclass(frozen=True)
class Reconciliation:
    """Score, feedback and (maybe) an improved translation to offer."""

    score: int
    feedback: str
    has_improved_translation: bool = False
    improved_translation: Optional[str] = None


def reconcile(
    result: AssessmentResult,
    assessed_text: str,
    thresholds: Optional[AssistantThresholds] = None,
) -> Reconciliation:
    """
    Decide whether an assessment's suggested translation may be offered.

    Score and feedback always pass through. The suggestion is offered only
    when the model asked for a new translation, the reader's text forms a
    complete thought, and the suggestion is not much longer than the text.
    """
    thresholds = thresholds or AssistantThresholds()

    suggestion = result.translation if result.new_translate else None
    if (
        suggestion
        and has_complete_thought(assessed_text)
        and is_reasonable_length(suggestion, assessed_text, thresholds)
    ):
        return Reconciliation(
            score=result.score,
            feedback=result.feedback,
            has_improved_translation=True,
            improved_translation=suggestion,
        )

    return Reconciliation(score=result.score, feedback=result.feedback)
