"""Microphone capture module."""

import pyaudio
import time
import logging
from typing import Callable, Optional
import numpy as np

from ..models.audio import AudioFrame


logger = logging.getLogger(__name__)


def compute_level(audio_chunk: bytes) -> float:
    """Normalized RMS level of 16-bit PCM audio, in [0.0, 1.0]."""
    samples = np.frombuffer(audio_chunk, dtype=np.int16)
    if samples.size == 0:
        return 0.0
    rms = np.sqrt(np.mean(samples.astype(np.float64) ** 2))
    return float(min(rms / 32768.0, 1.0))


def has_input_device() -> bool:
    """Check if a default input device is available for recording."""
    pyaudio_instance = pyaudio.PyAudio()
    try:
        pyaudio_instance.get_default_input_device_info()
        return True
    except (IOError, OSError) as e:
        logger.debug(f"No default input device: {e}")
        return False
    finally:
        pyaudio_instance.terminate()


class InputDeviceCheck:
    """Device check that reuses its last answer for ``ttl`` seconds."""

    def __init__(self,
                 ttl: float = 5.0,
                 check: Callable[[], bool] = has_input_device,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.check = check
        self.clock = clock
        self._checked_at: Optional[float] = None
        self._available = False

    def __call__(self) -> bool:
        now = self.clock()
        if self._checked_at is None or now - self._checked_at >= self.ttl:
            self._available = self.check()
            self._checked_at = now
            logger.debug(f"Input device available: {self._available}")
        return self._available


class AudioCapture:
    """Blocking microphone stream that yields frames with their level."""

    def __init__(
        self,
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        format: int = pyaudio.paInt16,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            sample_rate: Audio sample rate (16kHz for speech recognition)
            chunk_size: Size of each audio chunk in samples
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
        """
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format

        self.total_chunks = 0
        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream = None

    @property
    def frame_duration(self) -> float:
        """Duration of one frame in seconds."""
        return self.chunk_size / self.sample_rate

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def open(self) -> None:
        """Open the input stream. Raises if the device cannot be opened."""
        if self.is_open:
            logger.warning("Audio stream already open")
            return

        self.pyaudio_instance = pyaudio.PyAudio()
        try:
            self.stream = self.pyaudio_instance.open(
                format=self.format,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
                stream_callback=None
            )
        except Exception:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None
            raise

        self.total_chunks = 0
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")

    def read_frame(self) -> AudioFrame:
        """Read the next chunk from the stream."""
        if not self.is_open:
            raise RuntimeError("Audio stream is not open")

        audio_chunk = self.stream.read(
            self.chunk_size,
            exception_on_overflow=False
        )
        self.total_chunks += 1
        return AudioFrame(
            data=audio_chunk,
            timestamp=time.time(),
            frame_number=self.total_chunks,
            level=compute_level(audio_chunk),
        )

    def close(self) -> None:
        """Stop the stream and release PyAudio."""
        if self.stream is not None:
            try:
                self.stream.stop_stream()
                self.stream.close()
            finally:
                self.stream = None
        if self.pyaudio_instance is not None:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None
        logger.info(f"Audio stream closed. Total chunks: {self.total_chunks}")

    def __enter__(self) -> "AudioCapture":
        self.open()
        return self

    def __exit__(self, *args) -> None:
        self.close()
