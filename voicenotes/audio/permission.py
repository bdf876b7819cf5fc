"""Microphone permission gate."""

import logging
from typing import Callable

from ..storage.preferences import Preferences
from .capture import has_input_device


logger = logging.getLogger(__name__)

GRANTED_KEY = "microphone_granted"


class MicrophonePermission:
    """Stored user consent to record, combined with an input device check.

    Only grants are remembered; a denial is asked again on the next request.
    """

    def __init__(self,
                 preferences: Preferences,
                 device_check: Callable[[], bool] = has_input_device):
        self.preferences = preferences
        self.device_check = device_check

    def _has_consent(self) -> bool:
        return self.preferences.get_string(GRANTED_KEY) == "true"

    def is_granted(self) -> bool:
        return self._has_consent() and self.device_check()

    def request(self, prompt: Callable[[], bool]) -> bool:
        """Ask for consent when not already granted.

        Args:
            prompt: Asks the user and returns True when they allow recording

        Returns:
            True if recording is permitted
        """
        if not self.device_check():
            logger.warning("No microphone input device available")
            return False
        if self._has_consent():
            return True

        granted = bool(prompt())
        if granted:
            self.preferences.put_string(GRANTED_KEY, "true")
        logger.info(f"Microphone permission {'granted' if granted else 'denied'}")
        return granted
