"""Recognition request models."""

from dataclasses import dataclass
from enum import Enum


class LanguageModel(Enum):
    """Language model hint sent with a recognition request."""
    FREE_FORM = "free_form"
    WEB_SEARCH = "web_search"


@dataclass(frozen=True)
class RecognitionRequest:
    """One-shot recognition request."""
    language_model: LanguageModel = LanguageModel.FREE_FORM
    language: str = "ko-KR"
    partial_results: bool = False
