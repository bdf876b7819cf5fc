"""Pytest configuration and fixtures for VoiceNotes tests."""

import pytest
import tempfile
import logging
from unittest.mock import Mock, patch
import numpy as np
from pubsub import pub

from voicenotes.audio.permission import MicrophonePermission, GRANTED_KEY
from voicenotes.messages import MessageCatalog
from voicenotes.models.recognition import RecognitionRequest
from voicenotes.recognition.adapter import RecognitionAdapter
from voicenotes.recognition.base import AbstractSpeechService
from voicenotes.recognition.publisher import RecognitionPublisher
from voicenotes.services.note_session import NoteSessionController
from voicenotes.services.notifications import NotificationChannel
from voicenotes.storage.entry_store import EntryStore
from voicenotes.storage.preferences import Preferences


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without hardware or network")
    config.addinivalue_line("markers", "integration: tests wiring several components together")
    config.addinivalue_line("markers", "hardware: tests that need a real microphone")


class FakeSpeechService(AbstractSpeechService):
    """Speech service driven by the test: events are emitted by hand."""

    def __init__(self, available: bool = True, start_error: Exception = None):
        self.available = available
        self.start_error = start_error
        self.listener = None
        self.requests = []
        self.start_calls = 0
        self.stop_calls = 0
        self.destroyed = False

    def initialize(self) -> bool:
        return True

    def is_available(self) -> bool:
        return self.available

    def start_listening(self, request, listener) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error
        self.requests.append(request)
        self.listener = listener

    def stop_listening(self) -> None:
        self.stop_calls += 1

    def destroy(self) -> None:
        self.destroyed = True

    def emit(self, event) -> None:
        self.listener(event)


class FakeClock:
    """Millisecond clock that returns queued values, then keeps counting up."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start
        self.queued = []

    def __call__(self) -> int:
        if self.queued:
            return self.queued.pop(0)
        self.now += 1000
        return self.now


@pytest.fixture(autouse=True)
def clear_pubsub():
    """Drop pub/sub listeners left behind by a test."""
    yield
    pub.unsubAll()


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def preferences(temp_data_dir):
    return Preferences(temp_data_dir, "voice_notes")


@pytest.fixture
def entry_store(preferences):
    return EntryStore(preferences)


@pytest.fixture
def speech_service():
    return FakeSpeechService()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def messages():
    return MessageCatalog("en")


@pytest.fixture
def notifications():
    return NotificationChannel(capacity=8)


@pytest.fixture
def permission(temp_data_dir):
    """Microphone permission that is already granted."""
    prefs = Preferences(temp_data_dir, "permissions")
    prefs.put_string(GRANTED_KEY, "true")
    return MicrophonePermission(prefs, device_check=lambda: True)


@pytest.fixture
def adapter(speech_service):
    return RecognitionAdapter(
        service=speech_service,
        request=RecognitionRequest(),
        publisher=RecognitionPublisher(),
    )


@pytest.fixture
def make_controller(entry_store, adapter, permission, notifications, messages, clock):
    """Factory so tests can seed storage before the controller loads it."""
    controllers = []

    def _make(**overrides):
        kwargs = dict(
            store=entry_store,
            adapter=adapter,
            permission=permission,
            notifications=notifications,
            messages=messages,
            clock=clock,
        )
        kwargs.update(overrides)
        controller = NoteSessionController(**kwargs)
        controllers.append(controller)
        return controller

    yield _make
    for controller in controllers:
        controller.close()


@pytest.fixture
def state_changes():
    """Collects every UiState published on the state topic."""
    received = []

    def on_state(state):
        received.append(state)

    pub.subscribe(on_state, "notes.state")
    # Yield the listener too: pubsub only holds listeners weakly
    yield received, on_state


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream
        mock_stream.read.return_value = b'\x00' * 2048  # Silent audio
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        # Configure mock PyAudio instance
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None
        mock_pyaudio_instance.get_default_input_device_info.return_value = {"index": 0}

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # Generate 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate  # ~0.064 seconds
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    # Convert to 16-bit integers
    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()
