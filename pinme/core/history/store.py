"""
JSON history storage.

Stores upload records in a single JSON file that is rewritten on every
change. There is no locking: two pinme processes saving at the same time
can lose one of the records.

All file access is synchronous. UploadClient calls save() from inside the
event loop once per upload, which is fine for the single-task CLI; code
that uploads concurrently should move save() to an executor.
"""
import json
from pathlib import Path
from typing import List, Union

from ..config import PinmeConfig
from ..logging import get_logger
from .models import UploadHistory, UploadRecord

DEFAULT_LIST_LIMIT = 10


class HistoryStore:
    """
    File-based upload history.

    Failures are logged and reported through return values; they never
    propagate, so a broken history file cannot fail an upload.

    Example:
        >>> store = HistoryStore(Path.home() / ".pinme" / "upload-history.json")
        >>> store.save(record)
        True
        >>> store.list(5)
        [UploadRecord(...)]
    """

    def __init__(self, history_file: Union[str, Path]):
        """
        Initialize history storage.

        Args:
            history_file: Path of the JSON document
        """
        self._path = Path(history_file)
        self._logger = get_logger('pinme.history')

    @classmethod
    def from_config(cls, config: PinmeConfig) -> 'HistoryStore':
        return cls(config.history_file)

    @property
    def path(self) -> Path:
        """Get history file path."""
        return self._path

    def _ensure_file(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        if not self._path.exists():
            self._write(UploadHistory())

    def _read(self) -> UploadHistory:
        with self._path.open('r', encoding='utf-8') as f:
            return UploadHistory.from_dict(json.load(f))

    def _write(self, history: UploadHistory) -> None:
        with self._path.open('w', encoding='utf-8') as f:
            json.dump(history.to_dict(), f, indent=2)

    def save(self, record: UploadRecord) -> bool:
        """
        Prepend a record and rewrite the document.

        Args:
            record: Record to store

        Returns:
            True if the history was written
        """
        try:
            self._ensure_file()
            history = self._read()
            history.prepend(record)
            self._write(history)
            self._logger.debug(f"Saved history record for {record.content_hash}")
            return True
        except (OSError, ValueError, KeyError, TypeError) as e:
            self._logger.error(f"Error saving upload history: {e}")
            return False

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> List[UploadRecord]:
        """
        Return up to limit records, newest first.

        Returns an empty list if the history cannot be read.
        """
        try:
            self._ensure_file()
            return self._read().records[:max(limit, 0)]
        except (OSError, ValueError, KeyError, TypeError) as e:
            self._logger.error(f"Error reading upload history: {e}")
            return []

    def clear(self) -> bool:
        """Rewrite the document with no records."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._write(UploadHistory())
            self._logger.info("Upload history cleared")
            return True
        except OSError as e:
            self._logger.error(f"Error clearing upload history: {e}")
            return False
