"""Data model for saved translation drafts."""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (millisecond precision)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class TranslationDraft:
    """A reader's saved translation attempt for one story."""

    id: str
    content: str
    language: str
    date: str  # ISO-8601 timestamp

    def to_dict(self) -> Dict[str, Any]:
        """Stored fields; the id is the storage key, not a field."""
        data = asdict(self)
        data.pop("id")
        return data

    @classmethod
    def from_dict(cls, draft_id: str, data: Dict[str, Any]) -> "TranslationDraft":
        return cls(
            id=draft_id,
            content=data.get("content", ""),
            language=data.get("language", ""),
            date=data.get("date", ""),
        )

    @property
    def timestamp(self) -> datetime:
        """Parsed date, used for newest-first ordering."""
        try:
            parsed = datetime.fromisoformat(self.date.replace("Z", "+00:00"))
        except ValueError:
            return datetime.min.replace(tzinfo=timezone.utc)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
