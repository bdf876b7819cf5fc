"""Voice note data models."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class VoiceEntry:
    """One recorded voice note."""
    text: str
    timestamp: int  # Milliseconds since epoch

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VoiceEntry":
        """Build an entry from its persisted form.

        Whole-number floats such as ``1000.0`` are accepted as timestamps.

        Raises:
            KeyError: if a field is missing
            TypeError: if a field has the wrong type
            ValueError: if the text is blank or the timestamp is fractional
        """
        text = data["text"]
        timestamp = data["timestamp"]
        if not isinstance(text, str):
            raise TypeError(f"Entry text must be a string, got {type(text).__name__}")
        if not text.strip():
            raise ValueError("Entry text must not be blank")
        # bool is an int subclass, reject it explicitly
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise TypeError(f"Entry timestamp must be an integer, got {type(timestamp).__name__}")
        if isinstance(timestamp, float):
            if not timestamp.is_integer():
                raise ValueError(f"Entry timestamp must be a whole number, got {timestamp}")
            timestamp = int(timestamp)
        return cls(text=text, timestamp=timestamp)


def sort_newest_first(entries: Iterable[VoiceEntry]) -> List[VoiceEntry]:
    """Return entries sorted descending by timestamp."""
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)


@dataclass(frozen=True)
class UiState:
    """Snapshot of what the notes screen shows."""
    entries: Tuple[VoiceEntry, ...] = field(default_factory=tuple)
    is_listening: bool = False

    def with_listening(self, is_listening: bool) -> "UiState":
        return replace(self, is_listening=is_listening)

    def with_entries(self, entries: Iterable[VoiceEntry]) -> "UiState":
        return replace(self, entries=tuple(entries))
