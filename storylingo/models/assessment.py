"""Data models for AI assessment results and assistant state."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class AssessmentResult:
    """Result of scoring a reader's translation with the LLM."""

    score: int  # 0-100
    feedback: str
    new_translate: bool = False
    translation: Optional[str] = None

    @classmethod
    def failed(cls, feedback: str = "Error assessing translation") -> "AssessmentResult":
        """Neutral zero-score result used when the scorer cannot be reached."""
        return cls(score=0, feedback=feedback, new_translate=False, translation=None)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AssessmentResult":
        """Normalize the raw JSON object returned by the model."""
        try:
            score = int(round(float(data.get("score") or 0)))
        except (TypeError, ValueError):
            score = 0
        score = max(0, min(100, score))

        translation = data.get("translation") or None
        if translation is not None and not isinstance(translation, str):
            translation = str(translation)

        return cls(
            score=score,
            feedback=data.get("feedback") or "No feedback available",
            new_translate=bool(data.get("new_translate") or False),
            translation=translation,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "feedback": self.feedback,
            "new_translate": self.new_translate,
            "translation": self.translation,
        }


@dataclass(frozen=True)
class Notice:
    """Informational message shown to the reader (toast), never an error."""

    title: str
    description: str


@dataclass
class AssistantState:
    """UI-facing snapshot of the AI assistant panel."""

    text: str = ""
    ai_enabled: bool = False
    score: int = 0
    feedback: str = ""
    has_improved_translation: bool = False
    improved_translation: Optional[str] = None
    alternatives: List[str] = field(default_factory=list)
    is_assessing: bool = False
    is_loading_alternatives: bool = False
    last_assessed_text: str = ""
