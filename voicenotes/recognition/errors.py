"""Recognition error codes and exceptions."""

# Integer codes carried by ERROR events. The values follow the Android
# SpeechRecognizer constants so codes read the same on every platform.
ERROR_NETWORK_TIMEOUT = 1
ERROR_NETWORK = 2
ERROR_AUDIO = 3
ERROR_SERVER = 4
ERROR_CLIENT = 5
ERROR_SPEECH_TIMEOUT = 6
ERROR_NO_MATCH = 7
ERROR_RECOGNIZER_BUSY = 8
ERROR_INSUFFICIENT_PERMISSIONS = 9


class RecognitionError(Exception):
    """Base class for recognition control failures."""


class RecognitionUnavailableError(RecognitionError):
    """The speech service cannot be used on this device."""


class RecognitionStartError(RecognitionError):
    """The speech service raised while starting a session."""

    def __init__(self, reason: str):
        super().__init__(f"Cannot start recognition: {reason}")
        self.reason = reason
