"""Energy-based endpointing for one spoken utterance."""

import logging
from enum import Enum


logger = logging.getLogger(__name__)


class EndpointDecision(Enum):
    CONTINUE = "continue"
    END_OF_SPEECH = "end_of_speech"
    SPEECH_TIMEOUT = "speech_timeout"


class UtteranceDetector:
    """Decides when a single utterance has started and finished.

    Feed it the level of every captured frame. Before speech starts, waiting
    longer than ``speech_timeout`` yields SPEECH_TIMEOUT. Once a frame reaches
    ``speech_threshold``, ``end_silence`` seconds of quieter frames or a total
    capture of ``max_duration`` seconds yields END_OF_SPEECH.
    """

    def __init__(self,
                 frame_duration: float,
                 speech_threshold: float = 0.02,
                 speech_timeout: float = 5.0,
                 end_silence: float = 1.0,
                 max_duration: float = 15.0):
        if frame_duration <= 0:
            raise ValueError("frame_duration must be positive")
        self.frame_duration = frame_duration
        self.speech_threshold = speech_threshold
        self.speech_timeout = speech_timeout
        self.end_silence = end_silence
        self.max_duration = max_duration

        self.elapsed = 0.0
        self.silence = 0.0
        self.speech_started = False

    def update(self, level: float) -> EndpointDecision:
        self.elapsed += self.frame_duration
        is_speech = level >= self.speech_threshold

        if not self.speech_started:
            if is_speech:
                self.speech_started = True
                logger.debug(f"Speech started at {self.elapsed:.2f}s (level={level:.3f})")
            elif self.elapsed >= self.speech_timeout:
                return EndpointDecision.SPEECH_TIMEOUT
            return EndpointDecision.CONTINUE

        self.silence = 0.0 if is_speech else self.silence + self.frame_duration

        if self.silence >= self.end_silence:
            logger.debug(f"End of speech after {self.silence:.2f}s of silence")
            return EndpointDecision.END_OF_SPEECH
        if self.elapsed >= self.max_duration:
            logger.debug(f"Utterance reached max duration {self.max_duration:.1f}s")
            return EndpointDecision.END_OF_SPEECH
        return EndpointDecision.CONTINUE
