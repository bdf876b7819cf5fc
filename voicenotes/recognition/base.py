"""Abstract base class for speech services."""

from abc import ABC, abstractmethod
from typing import Callable

from ..models.events import RecognitionEvent
from ..models.recognition import RecognitionRequest

RecognitionListener = Callable[[RecognitionEvent], None]


class AbstractSpeechService(ABC):
    """Platform speech-to-text service driven one session at a time."""

    @abstractmethod
    def initialize(self) -> bool:
        """Initialize service resources and verify configuration.

        Returns:
            True if initialization successful, False otherwise
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Whether recognition can be used on this device right now."""
        pass

    @abstractmethod
    def start_listening(self, request: RecognitionRequest, listener: RecognitionListener) -> None:
        """Start one recognition session.

        The listener receives READY and then exactly one ERROR or RESULT,
        possibly from another thread. Raises if the session cannot start.
        """
        pass

    @abstractmethod
    def stop_listening(self) -> None:
        """Cancel the running session. A cancelled session emits nothing more."""
        pass

    @abstractmethod
    def destroy(self) -> None:
        """Release service resources."""
        pass
