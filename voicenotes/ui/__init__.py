"""Terminal user interface for VoiceNotes."""

from .notes_screen import NotesScreen, render_screen, format_timestamp
from .keyboard_input import KeyboardInputHandler

__all__ = [
    "NotesScreen",
    "render_screen",
    "format_timestamp",
    "KeyboardInputHandler",
]
