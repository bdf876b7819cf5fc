"""Recognition event publisher for pub/sub event delivery."""

import logging
from pubsub import pub

from ..models.events import RecognitionEvent

logger = logging.getLogger(__name__)

RECOGNITION_TOPIC = "recognition.event"


class RecognitionPublisher:
    """Publishes recognition events using pubsub.pub."""

    def __init__(self, topic: str = RECOGNITION_TOPIC):
        """Initialize recognition publisher.

        Args:
            topic: Pub/sub topic name for recognition events
        """
        self.topic = topic
        logger.info(f"RecognitionPublisher initialized with topic: {topic}")

    def publish(self, event: RecognitionEvent) -> None:
        """Publish a recognition event to the pub/sub topic."""
        logger.debug(f"Publishing recognition event: {event.type.value}")
        pub.sendMessage(self.topic, event=event)
