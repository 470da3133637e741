"""Key-value store integration."""

from sitestore.integrations.kv_store.abc import (
    KeyValueStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from sitestore.integrations.kv_store.fake import FakeKeyValueStore
from sitestore.integrations.kv_store.real import FileKeyValueStore

__all__ = [
    "FakeKeyValueStore",
    "FileKeyValueStore",
    "KeyValueStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
