"""Persistence of the voice note list."""

import json
import logging
from typing import List, Sequence

from ..models.entry import VoiceEntry
from .preferences import Preferences


logger = logging.getLogger(__name__)

ENTRIES_KEY = "entries"


class EntryStore:
    """Loads and saves the full list of voice entries in one preferences slot.

    The slot holds a JSON array string: ``[{"text": ..., "timestamp": ...}]``.
    """

    def __init__(self, preferences: Preferences, key: str = ENTRIES_KEY):
        self.preferences = preferences
        self.key = key
        logger.info(f"EntryStore initialized with {preferences.file_path} [{key}]")

    def load(self) -> List[VoiceEntry]:
        """Load persisted entries.

        Returns:
            Stored entries in stored order; empty when nothing is stored or the
            blob cannot be parsed
        """
        blob = self.preferences.get_string(self.key)
        if blob is None:
            return []

        try:
            items = json.loads(blob)
            if not isinstance(items, list):
                raise TypeError(f"Expected a JSON array, got {type(items).__name__}")
            entries = [VoiceEntry.from_dict(item) for item in items]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable entries blob: {e}")
            return []

        logger.debug(f"Loaded {len(entries)} entries")
        return entries

    def save(self, entries: Sequence[VoiceEntry]) -> None:
        """Serialize the full list and overwrite the stored blob."""
        blob = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False)
        self.preferences.put_string(self.key, blob)
        logger.info(f"Saved {len(entries)} entries")
