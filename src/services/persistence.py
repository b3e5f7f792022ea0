"""
Keeps the event store synchronized with a key-value backing medium.

The medium is treated as a convenience, not a guarantee: a missing or
corrupt value loads as an empty store, and a failed write leaves the
in-memory store as the source of truth for the rest of the session.
A corrupt value is copied under a backup key before it can be replaced.
"""

import json
import logging

from core.config import STORAGE_BACKUP_SUFFIX, STORAGE_KEY
from core.exceptions import PersistenceReadError, PersistenceWriteError
from core.storage import KeyValueMedium
from services.event_store import EventStore

logger = logging.getLogger(__name__)


def serialize_store(store: EventStore) -> str:
    """Compact JSON of the whole mapping."""
    return json.dumps(store.to_dict(), ensure_ascii=False, separators=(",", ":"))


def deserialize_store(payload: str) -> EventStore:
    """
    Parse a stored payload.

    Raises:
        PersistenceReadError: if the payload is not JSON or not the expected shape.
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise PersistenceReadError(f"Stored events are not valid JSON: {e}") from e
    return EventStore.from_dict(data)


class PersistenceBridge:
    """Loads and saves an EventStore under a single key of a medium."""

    def __init__(self, medium: KeyValueMedium, key: str = STORAGE_KEY):
        self.medium = medium
        self.key = key
        self.backup_key = key + STORAGE_BACKUP_SUFFIX
        # True when the last load() fell back to an empty store
        self.load_failed = False

    def _get_payload(self) -> str | None:
        try:
            return self.medium.get(self.key)
        except Exception as e:
            raise PersistenceReadError(f"Could not read '{self.key}': {e}") from e

    def read(self) -> EventStore:
        """
        Load the store, raising on failure.

        Raises:
            PersistenceReadError: medium unreadable or payload corrupt.
        """
        payload = self._get_payload()
        if payload is None:
            return EventStore()
        return deserialize_store(payload)

    def write(self, store: EventStore) -> None:
        """
        Save the store, raising on failure.

        Raises:
            PersistenceWriteError: medium refused or failed the write.
        """
        payload = serialize_store(store)
        try:
            self.medium.set(self.key, payload)
        except PersistenceWriteError:
            raise
        except Exception as e:
            raise PersistenceWriteError(f"Could not write '{self.key}': {e}") from e

    def load(self) -> EventStore:
        """
        Load the saved store; absent or corrupt data yields an empty store.

        A payload that cannot be parsed, or whose records could only be
        partly restored, is copied to backup_key so a later save cannot
        destroy it.
        """
        self.load_failed = False
        payload = None
        try:
            payload = self._get_payload()
            store = EventStore() if payload is None else deserialize_store(payload)
        except PersistenceReadError as e:
            logger.warning(f"Error loading events, starting empty: {e}")
            self.load_failed = True
            if payload is not None:
                self._back_up(payload)
            return EventStore()
        if store.skipped:
            self._back_up(payload)
        logger.info(f"Loaded {len(store)} events across {len(store.dates())} dates")
        return store

    def save(self, store: EventStore) -> bool:
        """Write the store; failures are logged and reported as False."""
        try:
            self.write(store)
        except PersistenceWriteError as e:
            logger.error(f"Error saving events, keeping them in memory only: {e}")
            return False
        return True

    def _back_up(self, payload: str) -> None:
        try:
            self.medium.set(self.backup_key, payload)
        except Exception as e:
            logger.error(f"Could not back up unreadable events to '{self.backup_key}': {e}")
            return
        logger.warning(f"Unreadable events kept under '{self.backup_key}'")
