"""Speech recognition module for VoiceNotes."""

from .base import AbstractSpeechService, RecognitionListener
from .adapter import RecognitionAdapter, AdapterState
from .publisher import RecognitionPublisher, RECOGNITION_TOPIC
from .errors import (
    RecognitionError,
    RecognitionUnavailableError,
    RecognitionStartError,
)

__all__ = [
    "AbstractSpeechService",
    "RecognitionListener",
    "RecognitionAdapter",
    "AdapterState",
    "RecognitionPublisher",
    "RECOGNITION_TOPIC",
    "RecognitionError",
    "RecognitionUnavailableError",
    "RecognitionStartError",
]
