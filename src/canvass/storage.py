"""
Persistence adapter for the survey list.

Two layers:
    KeyValueStore       a device-style string slot store (get_item/set_item)
    SurveyRepository    reads and writes the whole record list under one key

POLICY:
    The list is written wholesale after every create, update and delete.
    There is no incremental or transactional write and no versioning;
    a write replaces whatever the slot held before.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from canvass.errors import CorruptStoreError, PayloadError, StorageError
from canvass.model import SurveyRecord
from canvass.serialization import records_from_json, records_to_json

logger = logging.getLogger(__name__)

DEFAULT_KEY = "surveys"


class KeyValueStore:
    """String key to string value store, the shape of a device key-value API."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key was never set."""
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value stored under key."""
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """In-process store, used by tests and throwaway sessions."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStore(KeyValueStore):
    """
    Key-value slots kept in one JSON object on disk.

    Writes go to a temporary file in the same directory and are moved
    over the original with os.replace, so a crash mid-write leaves the
    previous file intact.

    A file that no longer parses is moved to <name>.corrupt on the next
    write, and the write starts from an empty store.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise CorruptStoreError(f"Corrupted store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptStoreError(f"Store file {self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(self.path.name + ".corrupt")

    def _set_aside(self, error: CorruptStoreError) -> None:
        logger.error("%s; moving it to %s and starting a new store", error, self.backup_path)
        try:
            os.replace(self.path, self.backup_path)
        except OSError as e:
            raise StorageError(f"Cannot move corrupted store {self.path} aside: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except CorruptStoreError as e:
            self._set_aside(e)
            data = {}
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".canvass-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e


class SurveyRepository:
    """Loads and stores the full survey list under a single key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_KEY):
        self.store = store
        self.key = key

    def load_all(self) -> List[SurveyRecord]:
        """
        Read the persisted list.

        Returns:
            The stored records in order, or [] if nothing was ever saved

        Raises:
            StorageError: If the store fails or the payload is malformed
        """
        raw = self.store.get_item(self.key)
        if not raw:
            logger.debug("No persisted surveys under key %r", self.key)
            return []
        try:
            records = records_from_json(raw)
        except PayloadError as e:
            raise StorageError(f"Persisted surveys under {self.key!r} are unreadable: {e}") from e
        logger.info("Loaded %d surveys", len(records))
        return records

    def save_all(self, records: Sequence[SurveyRecord]) -> None:
        """Overwrite the slot with the whole list."""
        self.store.set_item(self.key, records_to_json(records))
        logger.debug("Persisted %d surveys under key %r", len(records), self.key)
