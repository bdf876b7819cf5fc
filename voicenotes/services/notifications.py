"""Transient user notifications."""

import queue
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 64


class NotificationChannel:
    """Bounded, non-blocking queue of one-shot messages for the view.

    ``send`` never blocks: when the buffer is full the new message is dropped.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._queue: "queue.Queue[str]" = queue.Queue(maxsize=capacity)
        self.dropped = 0

    def send(self, message: str) -> bool:
        """Offer a message.

        Returns:
            True if buffered, False if dropped because the buffer is full
        """
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            self.dropped += 1
            logger.debug(f"Notification dropped (buffer full): {message}")
            return False
        return True

    def receive(self, timeout: Optional[float] = None) -> Optional[str]:
        """Take the next message, waiting up to timeout seconds (None: don't wait)."""
        try:
            if timeout is None:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[str]:
        """Take every buffered message in order."""
        messages = []
        while True:
            message = self.receive()
            if message is None:
                return messages
            messages.append(message)

    def __len__(self) -> int:
        return self._queue.qsize()
