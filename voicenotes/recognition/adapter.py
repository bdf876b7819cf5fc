"""Recognition adapter: start/stop control over a speech service plus its event stream."""

import logging
import threading
from enum import Enum
from functools import partial
from typing import Optional

from ..models.events import RecognitionEvent, RecognitionEventType
from ..models.recognition import RecognitionRequest
from .base import AbstractSpeechService
from .errors import RecognitionStartError, RecognitionUnavailableError
from .publisher import RecognitionPublisher

logger = logging.getLogger(__name__)


class AdapterState(Enum):
    IDLE = "idle"
    LISTENING = "listening"
    ERROR = "error"


class RecognitionAdapter:
    """Runs one-shot recognition sessions and republishes their events.

    Each session gets a number; events reported for any other session, or
    after the session was stopped, are dropped. Exactly one terminal event
    (RESULT or ERROR) is published per session, after which the adapter is
    no longer listening.
    """

    def __init__(self,
                 service: AbstractSpeechService,
                 request: RecognitionRequest,
                 publisher: RecognitionPublisher):
        self.service = service
        self.request = request
        self.publisher = publisher

        self.state = AdapterState.IDLE
        self.last_error_code: Optional[int] = None
        self._session = 0
        self._lock = threading.RLock()

        logger.info(f"RecognitionAdapter initialized: language={request.language}, "
                    f"model={request.language_model.value}, partial={request.partial_results}")

    @property
    def is_listening(self) -> bool:
        return self.state == AdapterState.LISTENING

    def start(self) -> bool:
        """Start a recognition session.

        Returns:
            True if a session started, False if one is already running. A session
            may already have ended when the service reported a result or error
            while starting.

        Raises:
            RecognitionUnavailableError: the service is unavailable
            RecognitionStartError: the service raised while starting
        """
        with self._lock:
            if self.is_listening:
                logger.debug("start() ignored: already listening")
                return False

            if not self.service.is_available():
                logger.warning("Speech recognition is not available")
                raise RecognitionUnavailableError("Speech recognition is not available")

            # Enter LISTENING before the call so READY emitted during start is kept
            self._session += 1
            session = self._session
            self.state = AdapterState.LISTENING
            try:
                self.service.start_listening(self.request, partial(self._on_service_event, session))
            except Exception as e:
                self.state = AdapterState.IDLE
                logger.error(f"Failed to start recognition session {session}: {e}")
                raise RecognitionStartError(str(e)) from e

            logger.info(f"Recognition session {session} started")
            return True

    def stop(self) -> bool:
        """Cancel the running session.

        Returns:
            True if a session was cancelled, False if nothing was running
        """
        with self._lock:
            if not self.is_listening:
                return False
            self.state = AdapterState.IDLE
            session = self._session
            self.service.stop_listening()
            logger.info(f"Recognition session {session} stopped")
            return True

    def _on_service_event(self, session: int, event: RecognitionEvent) -> None:
        with self._lock:
            if session != self._session or not self.is_listening:
                logger.debug(f"Dropping {event.type.value} event from inactive session {session}")
                return
            if event.type == RecognitionEventType.ERROR:
                self.state = AdapterState.ERROR
                self.last_error_code = event.error_code
            elif event.type == RecognitionEventType.RESULT:
                self.state = AdapterState.IDLE

        # Publish outside the lock so listeners may call back into start/stop
        self.publisher.publish(event)

    def destroy(self) -> None:
        """Stop any session and release the service."""
        self.stop()
        self.service.destroy()
        logger.info("RecognitionAdapter destroyed")
