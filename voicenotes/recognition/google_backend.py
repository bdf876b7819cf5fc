"""Google Speech-to-Text speech service."""

import time
import logging
import threading
from typing import Callable, List, Optional

from google.cloud import speech
from google.api_core import exceptions as gax_exceptions
from google.oauth2 import service_account

from ..audio.capture import AudioCapture, has_input_device
from ..audio.utterance import EndpointDecision, UtteranceDetector
from ..models.events import RecognitionEvent
from ..models.recognition import LanguageModel, RecognitionRequest
from .base import AbstractSpeechService, RecognitionListener
from .errors import (
    ERROR_AUDIO,
    ERROR_CLIENT,
    ERROR_NETWORK,
    ERROR_NETWORK_TIMEOUT,
    ERROR_NO_MATCH,
    ERROR_RECOGNIZER_BUSY,
    ERROR_SERVER,
    ERROR_SPEECH_TIMEOUT,
)

logger = logging.getLogger(__name__)

GOOGLE_MODELS = {
    LanguageModel.FREE_FORM: "default",
    LanguageModel.WEB_SEARCH: "command_and_search",
}


def error_code_for(exc: Exception) -> int:
    """Map a failure during recognize() to a recognition error code."""
    if isinstance(exc, gax_exceptions.DeadlineExceeded):
        return ERROR_NETWORK_TIMEOUT
    if isinstance(exc, gax_exceptions.ServiceUnavailable):
        return ERROR_NETWORK
    if isinstance(exc, gax_exceptions.GoogleAPICallError):
        return ERROR_SERVER
    return ERROR_CLIENT


class GoogleSpeechService(AbstractSpeechService):
    """Captures one utterance from the microphone and recognizes it with Google."""

    def __init__(self,
                 credentials_path: Optional[str],
                 sample_rate: int = 16000,
                 chunk_size: int = 1024,
                 channels: int = 1,
                 max_alternatives: int = 5,
                 enable_automatic_punctuation: bool = True,
                 speech_threshold: float = 0.02,
                 speech_timeout: float = 5.0,
                 end_silence: float = 1.0,
                 max_duration: float = 15.0,
                 request_timeout: float = 10.0,
                 cancel_join_timeout: float = 0.5,
                 capture_factory: Optional[Callable[[], AudioCapture]] = None,
                 device_check: Callable[[], bool] = has_input_device):
        """Initialize Google speech service.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            sample_rate: Capture sample rate in Hz
            chunk_size: Samples per captured frame
            channels: Number of capture channels
            max_alternatives: Candidate transcripts to ask for
            enable_automatic_punctuation: Enable automatic punctuation
            speech_threshold: Frame level that counts as speech
            speech_timeout: Seconds to wait for speech before giving up
            end_silence: Seconds of silence that end the utterance
            max_duration: Longest utterance captured, in seconds
            request_timeout: Per-request timeout for recognize()
            cancel_join_timeout: Seconds to wait for a cancelled session before starting anyway
            capture_factory: Builds the AudioCapture for a session
            device_check: Reports whether a microphone is present
        """
        self.credentials_path = credentials_path
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.max_alternatives = max_alternatives
        self.enable_automatic_punctuation = enable_automatic_punctuation
        self.speech_threshold = speech_threshold
        self.speech_timeout = speech_timeout
        self.end_silence = end_silence
        self.max_duration = max_duration
        self.request_timeout = request_timeout
        self.cancel_join_timeout = cancel_join_timeout
        self.capture_factory = capture_factory or (
            lambda: AudioCapture(sample_rate=sample_rate, chunk_size=chunk_size, channels=channels))
        self.device_check = device_check

        self.client: Optional[speech.SpeechClient] = None
        self.project_id: Optional[str] = None
        self.service_name = "Google Speech-to-Text"

        self._session_thread: Optional[threading.Thread] = None
        self._cancel_event: Optional[threading.Event] = None

    def initialize(self) -> bool:
        """Initialize Google Speech client from service account credentials."""
        if not self.credentials_path:
            logger.error("Google credentials path is not configured - recognition unavailable")
            return False
        try:
            logger.info(f"Loading Google credentials from: {self.credentials_path}")
            credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
            self.client = speech.SpeechClient(credentials=credentials)
            self.project_id = credentials.project_id
        except Exception as e:
            logger.error(f"Google Speech client initialization failed: {e}")
            self.client = None
            return False

        logger.info(f"Using Google Cloud project: {self.project_id}")
        logger.info("Google Speech-to-Text service initialized successfully")
        return True

    def is_available(self) -> bool:
        return self.client is not None and self.device_check()

    def build_config(self, request: RecognitionRequest) -> speech.RecognitionConfig:
        return speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=self.sample_rate,
            audio_channel_count=self.channels,
            language_code=request.language,
            model=GOOGLE_MODELS[request.language_model],
            max_alternatives=self.max_alternatives,
            enable_automatic_punctuation=self.enable_automatic_punctuation,
        )

    def start_listening(self, request: RecognitionRequest, listener: RecognitionListener) -> None:
        if self.client is None:
            raise RuntimeError("Google Speech client is not initialized")
        previous = self._session_thread
        if previous is not None and previous.is_alive():
            if self._cancel_event is None or not self._cancel_event.is_set():
                raise RuntimeError(f"recognizer busy (error {ERROR_RECOGNIZER_BUSY})")
            # A cancelled session emits nothing, so it may finish recognize() in the background
            previous.join(timeout=self.cancel_join_timeout)
            if previous.is_alive():
                logger.info("Previous cancelled session still recognizing, starting a new one")
        if request.partial_results:
            logger.warning("Partial results are not supported, only the final result is delivered")

        # Open synchronously so device failures reach the caller
        capture = self.capture_factory()
        capture.open()

        cancel_event = threading.Event()
        self._cancel_event = cancel_event
        self._session_thread = threading.Thread(
            target=self._run_session,
            args=(capture, request, listener, cancel_event),
            daemon=True,
        )
        self._session_thread.name = "RecognitionSessionThread"
        self._session_thread.start()

    def stop_listening(self) -> None:
        if self._cancel_event is not None:
            self._cancel_event.set()

    def _run_session(self,
                     capture: AudioCapture,
                     request: RecognitionRequest,
                     listener: RecognitionListener,
                     cancel_event: threading.Event) -> None:
        """Session thread: capture one utterance, then recognize it."""
        audio = bytearray()
        detector = UtteranceDetector(
            frame_duration=capture.frame_duration,
            speech_threshold=self.speech_threshold,
            speech_timeout=self.speech_timeout,
            end_silence=self.end_silence,
            max_duration=self.max_duration,
        )
        decision = EndpointDecision.CONTINUE

        try:
            listener(RecognitionEvent.ready())
            while not cancel_event.is_set():
                frame = capture.read_frame()
                audio.extend(frame.data)
                decision = detector.update(frame.level)
                if decision != EndpointDecision.CONTINUE:
                    break
        except (IOError, OSError) as e:
            logger.error(f"Audio capture failed: {e}")
            if not cancel_event.is_set():
                listener(RecognitionEvent.error(ERROR_AUDIO))
            return
        finally:
            capture.close()

        if cancel_event.is_set():
            logger.info("Recognition session cancelled")
            return

        if decision == EndpointDecision.SPEECH_TIMEOUT:
            logger.info("No speech detected before timeout")
            listener(RecognitionEvent.error(ERROR_SPEECH_TIMEOUT))
            return

        try:
            candidates = self.recognize(bytes(audio), request)
        except Exception as e:
            code = error_code_for(e)
            logger.error(f"Google STT recognize failed (code={code}): {e}")
            if not cancel_event.is_set():
                listener(RecognitionEvent.error(code))
            return

        if cancel_event.is_set():
            return
        if not candidates:
            logger.debug("--- NO SPEECH DETECTED ---")
            listener(RecognitionEvent.error(ERROR_NO_MATCH))
        else:
            listener(RecognitionEvent.result(candidates))

    def recognize(self, audio: bytes, request: RecognitionRequest) -> List[str]:
        """Run synchronous recognition and return the ranked candidate transcripts."""
        start_time = time.time()
        logger.debug(f"Audio size: {len(audio)} bytes; Language: {request.language}; "
                     f"Model: {GOOGLE_MODELS[request.language_model]}")

        response = self.client.recognize(
            config=self.build_config(request),
            audio=speech.RecognitionAudio(content=audio),
            timeout=self.request_timeout,
        )
        processing_time = time.time() - start_time

        if not response.results:
            return []

        alternatives = response.results[0].alternatives
        candidates = [alternative.transcript for alternative in alternatives]
        logger.debug(f"✅ TRANSCRIPTION SUCCESS: {candidates[:1]} "
                     f"(alternatives: {len(candidates)}, processing_time: {processing_time:.3f}s)")
        return candidates

    def destroy(self) -> None:
        """Cancel any session and drop the client."""
        self.stop_listening()
        if (self._session_thread and self._session_thread.is_alive()
                and self._session_thread is not threading.current_thread()):
            self._session_thread.join(timeout=2.0)
            if self._session_thread.is_alive():
                logger.warning("Recognition session thread did not stop cleanly")
        self.client = None
        logger.info("Google Speech service destroyed")
