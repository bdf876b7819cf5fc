"""Note session controller: recognition lifecycle, note list and user messages."""

import time
import logging
import threading
from typing import Callable, Optional, Tuple

from pubsub import pub

from ..audio.permission import MicrophonePermission
from ..messages import MessageCatalog
from ..models.entry import UiState, VoiceEntry, sort_newest_first
from ..models.events import RecognitionEvent, RecognitionEventType
from ..recognition.adapter import RecognitionAdapter
from ..recognition.errors import RecognitionStartError, RecognitionUnavailableError
from ..storage.entry_store import EntryStore
from .notifications import NotificationChannel

logger = logging.getLogger(__name__)

STATE_TOPIC = "notes.state"


def current_time_millis() -> int:
    return int(time.time() * 1000)


class NoteSessionController:
    """Owns the UiState and reacts to user intent, recognition events and app lifecycle.

    All transitions run under one re-entrant lock, so user actions and
    recognition callbacks from the service thread are applied one at a time.
    Every new state is published on ``notes.state``.
    """

    def __init__(self,
                 store: EntryStore,
                 adapter: RecognitionAdapter,
                 permission: MicrophonePermission,
                 notifications: NotificationChannel,
                 messages: MessageCatalog,
                 clock: Callable[[], int] = current_time_millis,
                 state_topic: str = STATE_TOPIC):
        """Initialize the controller and load the stored notes.

        Args:
            store: Persistence for the note list
            adapter: Recognition control surface
            permission: Microphone permission gate checked before every start
            notifications: Channel for transient user messages
            messages: Localized message catalog
            clock: Wall clock in milliseconds since epoch
            state_topic: Pub/sub topic for state snapshots
        """
        self.store = store
        self.adapter = adapter
        self.permission = permission
        self.notifications = notifications
        self.messages = messages
        self.clock = clock
        self.state_topic = state_topic

        self._lock = threading.RLock()
        self._resume_listening = False
        self._state = UiState(entries=tuple(sort_newest_first(store.load())))

        pub.subscribe(self._on_recognition_event, adapter.publisher.topic)
        logger.info(f"NoteSessionController initialized with {len(self._state.entries)} entries")

    @property
    def state(self) -> UiState:
        return self._state

    @property
    def entries(self) -> Tuple[VoiceEntry, ...]:
        return self._state.entries

    @property
    def is_listening(self) -> bool:
        return self._state.is_listening

    def _set_state(self, state: UiState) -> None:
        if state == self._state:
            return
        self._state = state
        pub.sendMessage(self.state_topic, state=state)

    def _notify(self, key: str, **kwargs) -> None:
        message = self.messages.get(key, **kwargs)
        logger.debug(f"Notify: {message}")
        self.notifications.send(message)

    def start_listening(self) -> None:
        """Start recognition when idle, permitted and available."""
        with self._lock:
            if self._state.is_listening:
                return

            if not self.permission.is_granted():
                logger.warning("Microphone permission not granted")
                self._notify("permission_denied")
                return

            try:
                started = self.adapter.start()
            except RecognitionUnavailableError:
                self._notify("recognition_unavailable")
                return
            except RecognitionStartError as e:
                self._notify("start_failed", reason=e.reason)
                return

            if started:
                # A terminal event delivered during start has already ended the session
                self._set_state(self._state.with_listening(self.adapter.is_listening))

    def stop_listening(self) -> None:
        """Stop recognition when listening. No entry is added."""
        with self._lock:
            if not self._state.is_listening:
                return
            self.adapter.stop()
            self._set_state(self._state.with_listening(False))

    def toggle_listening(self) -> None:
        with self._lock:
            if self._state.is_listening:
                self.stop_listening()
            else:
                self.start_listening()

    def on_pause(self) -> None:
        """The app lost the foreground: stop, remembering whether we were listening."""
        with self._lock:
            if self._state.is_listening:
                logger.info("Pausing: stopping recognition")
                self._resume_listening = True
                self.stop_listening()

    def on_resume(self) -> None:
        """The app regained the foreground: restart if it was listening when paused."""
        with self._lock:
            if self._resume_listening:
                logger.info("Resuming: restarting recognition")
                self._resume_listening = False
                self.start_listening()

    def _on_recognition_event(self, event: RecognitionEvent) -> None:
        with self._lock:
            if event.type == RecognitionEventType.READY:
                self._notify("please_speak")
                return

            if event.type == RecognitionEventType.ERROR:
                logger.info(f"Recognition error: {event.error_code}")
                self._notify("recognition_error", code=event.error_code)
            elif event.transcript is not None:
                self._add_entry(event.transcript)
            else:
                logger.info("Blank transcript ignored")

            self._set_state(self._state.with_listening(False))

    def _add_entry(self, text: str) -> VoiceEntry:
        entry = VoiceEntry(text=text, timestamp=self.clock())
        updated = sort_newest_first([entry, *self._state.entries])
        self._set_state(self._state.with_entries(updated))
        try:
            self.store.save(updated)
        except OSError as e:
            logger.exception(f"Failed to save entries: {e}")
            self._notify("save_failed", reason=str(e))
        logger.info(f"Added entry at {entry.timestamp}: '{text}'")
        return entry

    def close(self) -> None:
        """Unsubscribe from recognition events and release the adapter."""
        with self._lock:
            try:
                pub.unsubscribe(self._on_recognition_event, self.adapter.publisher.topic)
            except Exception as e:
                logger.warning(f"Error during unsubscribe: {e}")
            self.adapter.destroy()
            self._set_state(self._state.with_listening(False))
            logger.info("NoteSessionController closed")
