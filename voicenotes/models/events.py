"""Recognition event models delivered from the speech service to the controller."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RecognitionEventType(Enum):
    """Kinds of events a recognition session produces."""
    READY = "ready"
    ERROR = "error"
    RESULT = "result"


@dataclass(frozen=True)
class RecognitionEvent:
    """Tagged recognition event.

    READY carries nothing, ERROR carries ``error_code`` and RESULT carries the
    candidate transcripts in the order the service ranked them.
    """
    type: RecognitionEventType
    error_code: Optional[int] = None
    candidates: List[str] = field(default_factory=list)

    @classmethod
    def ready(cls) -> "RecognitionEvent":
        return cls(RecognitionEventType.READY)

    @classmethod
    def error(cls, code: int) -> "RecognitionEvent":
        return cls(RecognitionEventType.ERROR, error_code=code)

    @classmethod
    def result(cls, candidates: List[str]) -> "RecognitionEvent":
        return cls(RecognitionEventType.RESULT, candidates=list(candidates))

    @property
    def is_terminal(self) -> bool:
        """True for events that end a recognition session."""
        return self.type in (RecognitionEventType.ERROR, RecognitionEventType.RESULT)

    @property
    def transcript(self) -> Optional[str]:
        """First candidate, or None when absent or blank."""
        if not self.candidates:
            return None
        first = self.candidates[0]
        if first is None or not first.strip():
            return None
        return first
