"""Named key-value preferences backed by a JSON file."""

import os
import json
import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional


logger = logging.getLogger(__name__)


class Preferences:
    """String key-value slots stored in ``<data_dir>/<name>.json``.

    Every write rewrites the whole file through a temp file and ``os.replace``,
    so readers see either the old or the new content.
    """

    def __init__(self, data_dir: str, name: str):
        """Initialize preferences.

        Args:
            data_dir: Directory holding the preferences file
            name: Preferences group name, used as the file stem
        """
        self.data_dir = Path(data_dir)
        self.name = name
        self.file_path = self.data_dir / f"{name}.json"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Preferences '{name}' at {self.file_path}")

    def _read_all(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable preferences file {self.file_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Preferences file {self.file_path} is not a JSON object")
            return {}
        return data

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the string stored under key, or default."""
        value = self._read_all().get(key)
        if not isinstance(value, str):
            return default
        return value

    def put_string(self, key: str, value: str) -> None:
        """Store value under key, replacing the file in a single step."""
        data = self._read_all()
        data[key] = value

        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.name}.", suffix=".tmp", dir=self.data_dir)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            logger.error(f"Error writing preferences {self.file_path}: {e}")
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.debug(f"Preferences '{self.name}' key '{key}' written ({len(value)} chars)")

    def contains(self, key: str) -> bool:
        return key in self._read_all()
