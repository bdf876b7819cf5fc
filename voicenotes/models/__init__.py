"""Data models for the VoiceNotes application."""

from .entry import VoiceEntry, UiState, sort_newest_first
from .events import RecognitionEvent, RecognitionEventType
from .recognition import RecognitionRequest, LanguageModel
from .audio import AudioFrame

__all__ = [
    "VoiceEntry",
    "UiState",
    "sort_newest_first",
    "RecognitionEvent",
    "RecognitionEventType",
    "RecognitionRequest",
    "LanguageModel",
    "AudioFrame",
]
