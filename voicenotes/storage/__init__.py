"""Storage layer for VoiceNotes."""

from .preferences import Preferences
from .entry_store import EntryStore

__all__ = [
    "Preferences",
    "EntryStore",
]
