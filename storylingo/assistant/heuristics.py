"""Completeness heuristics deciding when a translation is worth sending to the LLM."""

import re

from ..config import AssistantThresholds

# Characters that close a sentence or a clause
CLAUSE_TERMINATORS = ".!?,"
# Characters that close a sentence
SENTENCE_TERMINATORS = ".!?"

_SENTENCE_SPLIT = re.compile(r"[.!?]")


def ends_with_terminator(text: str, terminators: str = CLAUSE_TERMINATORS) -> bool:
    """Whether the text, ignoring trailing whitespace, ends with a terminator."""
    stripped = text.strip()
    return bool(stripped) and stripped[-1] in terminators


def last_char_is_terminator(text: str) -> bool:
    """Whether the character just typed closes a clause (no stripping)."""
    return bool(text) and text[-1] in CLAUSE_TERMINATORS


def has_complete_sentence(text: str) -> bool:
    """Whether a sentence terminator appears anywhere in the text."""
    return any(ch in text for ch in SENTENCE_TERMINATORS)


def has_assessable_content(text: str) -> bool:
    """One-time check when AI mode is switched on: any clause terminator present."""
    return bool(text.strip()) and any(ch in text for ch in CLAUSE_TERMINATORS)


def is_significant_change(current: str, previous: str, delta: int) -> bool:
    """
    Whether the text moved far enough from the last assessed text.

    Only meaningful once something has been assessed: with no previous text
    there is nothing to compare against.
    """
    if not previous:
        return False
    return len(current) - len(previous) > delta or len(current) < len(previous)


def first_sentence(original: str) -> str:
    """First segment of the original text split on sentence terminators."""
    return _SENTENCE_SPLIT.split(original)[0]


def is_too_short(text: str, original: str, thresholds: AssistantThresholds) -> bool:
    """Whether the candidate is too short, absolutely or against the original's first sentence."""
    if len(text) < thresholds.min_assess_length:
        return True
    first_length = len(first_sentence(original))
    return first_length > 0 and len(text) < first_length * thresholds.min_first_sentence_ratio


def has_complete_thought(text: str) -> bool:
    """Gate applied before exposing an improved translation."""
    return ends_with_terminator(text) or "." in text


def is_reasonable_length(suggestion: str, text: str, thresholds: AssistantThresholds) -> bool:
    """The suggestion must not run far beyond what the reader wrote."""
    return len(suggestion) <= len(text) * thresholds.max_suggestion_ratio


def can_request_alternatives(text: str) -> bool:
    """Alternatives are only offered for text holding at least one full sentence."""
    return ends_with_terminator(text, SENTENCE_TERMINATORS) or has_complete_sentence(text)
