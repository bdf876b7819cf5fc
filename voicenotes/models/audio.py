"""Audio-related data models."""

from dataclasses import dataclass


@dataclass
class AudioFrame:
    """A single audio frame with timestamp."""
    data: bytes
    timestamp: float  # Time when this frame was captured
    frame_number: int
    level: float = 0.0  # Normalized RMS in [0.0, 1.0]
