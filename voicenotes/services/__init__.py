"""Services layer for VoiceNotes application logic."""

from .notifications import NotificationChannel
from .note_session import NoteSessionController, STATE_TOPIC

__all__ = [
    "NotificationChannel",
    "NoteSessionController",
    "STATE_TOPIC",
]
