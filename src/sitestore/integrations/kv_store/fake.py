"""Fake in-memory key-value store for testing."""

from sitestore.integrations.kv_store.abc import KeyValueStore, StorageWriteError


class FakeKeyValueStore(KeyValueStore):
    """In-memory fake implementation for testing.

    This class tracks all writes for test assertions.
    State is provided via constructor or captured during execution.
    """

    def __init__(
        self,
        values: dict[str, str] | None = None,
        failing_keys: set[str] | None = None,
    ) -> None:
        """Create FakeKeyValueStore.

        Args:
            values: Optional initial contents (key -> text)
            failing_keys: Keys whose writes raise StorageWriteError, simulating
                an exhausted quota
        """
        self._values: dict[str, str] = dict(values or {})
        self._failing_keys: set[str] = set(failing_keys or ())
        self._write_log: list[str] = []

    @property
    def values(self) -> dict[str, str]:
        """Get current contents for test assertions."""
        return self._values.copy()

    @property
    def write_log(self) -> list[str]:
        """Keys written, in order, for test assertions."""
        return list(self._write_log)

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        if key in self._failing_keys:
            raise StorageWriteError(key, "Quota exceeded")
        self._values[key] = value
        self._write_log.append(key)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._values)
