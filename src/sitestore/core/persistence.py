"""JSON documents on top of a KeyValueStore, degrading instead of raising.

Reads that hit malformed or unreadable data return None; writes that fail are
logged and reported as False. Callers keep their in-memory state either way,
so a failed write leaves persisted state behind memory until the next
successful write.
"""

import json
import logging
from typing import Any

from sitestore.core.codec import decode_json, encode_json
from sitestore.integrations.kv_store.abc import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """Tagged-date JSON documents keyed by string."""

    def __init__(self, kv_store: KeyValueStore) -> None:
        self._kv_store = kv_store

    @property
    def kv_store(self) -> KeyValueStore:
        return self._kv_store

    def load(self, key: str) -> Any | None:
        """Load and decode the document under key.

        Returns:
            The decoded document, or None if absent, empty or unreadable
        """
        try:
            text = self._kv_store.get(key)
        except StorageError as e:
            logger.warning(f"Failed to read '{key}': {e}")
            return None
        if not text:
            return None
        try:
            return decode_json(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed JSON under '{key}', treating as empty: {e}")
            return None

    def save(self, key: str, data: Any) -> bool:
        """Encode and store data under key.

        Returns:
            True if the write reached the store, False if it failed
        """
        try:
            text = encode_json(data)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize '{key}': {e}")
            return False
        try:
            self._kv_store.set(key, text)
        except StorageError as e:
            logger.error(f"Failed to write '{key}': {e}")
            return False
        return True

    def remove(self, key: str) -> bool:
        """Remove key. Returns False (after logging) if the store refused."""
        try:
            self._kv_store.remove(key)
        except StorageError as e:
            logger.error(f"Failed to remove '{key}': {e}")
            return False
        return True

    def size_of(self, key: str) -> int:
        """UTF-8 byte length of the raw text under key (0 if absent or unreadable)."""
        try:
            text = self._kv_store.get(key)
        except StorageError:
            return 0
        return len(text.encode("utf-8")) if text else 0
