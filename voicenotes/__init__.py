"""VoiceNotes - speech to timestamped text notes."""

__version__ = "0.1.0"
