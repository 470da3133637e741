"""Abstract base class for string key-value persistence."""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Base class for key-value store failures."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"{message} (key: {key})")


class StorageReadError(StorageError):
    """Raised when a stored value exists but cannot be read."""


class StorageWriteError(StorageError):
    """Raised when a value cannot be written (quota, permissions, I/O)."""


class KeyValueStore(ABC):
    """Abstract interface for synchronous UTF-8 text storage keyed by string.

    Implementations include:
    - FakeKeyValueStore: In-memory for testing
    - FileKeyValueStore: One file per key in a directory
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Read the value stored under key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageReadError: If the value exists but cannot be read
        """
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Args:
            key: Storage key
            value: UTF-8 text to store

        Raises:
            StorageWriteError: If the value cannot be persisted
        """
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op.

        Args:
            key: Storage key

        Raises:
            StorageWriteError: If the key exists but cannot be removed
        """
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """List all keys currently stored.

        Returns:
            Stored keys in sorted order
        """
        ...
