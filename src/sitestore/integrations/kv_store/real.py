"""File-backed key-value store implementation."""

import re
from pathlib import Path

from sitestore.integrations.kv_store.abc import (
    KeyValueStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

_SAFE_KEY = re.compile(r"[A-Za-z0-9_.-]+")


class FileKeyValueStore(KeyValueStore):
    """Production store keeping one UTF-8 file per key.

    Layout:
    - {root}/{key}.json - the stored text for key

    There is no locking; concurrent writers follow last-write-wins.
    """

    def __init__(self, root: Path) -> None:
        """Create FileKeyValueStore.

        Args:
            root: Directory holding the key files (created on first write)
        """
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str, error: type[StorageError]) -> Path:
        if not _SAFE_KEY.fullmatch(key):
            raise error(key, f"Invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key, StorageReadError)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(key, f"Cannot read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key, StorageWriteError)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageWriteError(key, f"Cannot write {path}: {e}") from e

    def remove(self, key: str) -> None:
        path = self._path(key, StorageWriteError)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(key, f"Cannot remove {path}: {e}") from e

    def keys(self) -> list[str]:
        if not self._root.exists():
            return []
        return sorted(path.stem for path in self._root.glob("*.json"))
