"""Configuration data structures and loading.

Provides immutable configuration loaded from ~/.sitestore/config.toml
(or $SITESTORE_HOME/config.toml). A missing file means defaults.
"""

import os
import re
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_THEME_ID = "modern-blue"
DEFAULT_RECENT_LIMIT = 20
DEFAULT_CACHE_TTL_MINUTES = 60
DEFAULT_ICON_REFERENCE_FIELDS = ("iconId", "primaryIconId", "secondaryIconId", "icon")

# Prefixed keys become file names in the store directory.
_KEY_PREFIX = re.compile(r"[A-Za-z0-9_.-]*")


def sitestore_home() -> Path:
    """Directory holding config and data, honouring SITESTORE_HOME."""
    override = os.environ.get("SITESTORE_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".sitestore"


@dataclass(frozen=True)
class SiteStoreConfig:
    """Immutable configuration.

    Loaded once at the entry point and stored in SiteStoreContext.
    """

    store_dir: Path = field(default_factory=lambda: sitestore_home() / "data")
    key_prefix: str = ""
    default_theme_id: str = DEFAULT_THEME_ID
    recent_limit: int = DEFAULT_RECENT_LIMIT
    default_cache_ttl_minutes: int = DEFAULT_CACHE_TTL_MINUTES
    duplicate_url_invalidates: bool = False
    icon_reference_fields: tuple[str, ...] = DEFAULT_ICON_REFERENCE_FIELDS


def _expect(data: dict[str, Any], key: str, kind: type, source: Path) -> Any:
    value = data[key]
    # bool is an int subclass; reject it where an int is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"'{key}' in {source} must be {kind.__name__}, got {value!r}")
    return value


def parse_config(data: dict[str, Any], source: Path) -> SiteStoreConfig:
    """Build a SiteStoreConfig from parsed TOML, filling defaults.

    Unknown keys are ignored.

    Raises:
        ValueError: If a known key has the wrong type or an invalid value
    """
    defaults = SiteStoreConfig()
    store_dir = defaults.store_dir
    if "store_dir" in data:
        store_dir = Path(_expect(data, "store_dir", str, source)).expanduser()

    recent_limit = defaults.recent_limit
    if "recent_limit" in data:
        recent_limit = _expect(data, "recent_limit", int, source)
        if recent_limit < 1:
            raise ValueError(f"'recent_limit' in {source} must be at least 1")

    ttl = defaults.default_cache_ttl_minutes
    if "default_cache_ttl_minutes" in data:
        ttl = _expect(data, "default_cache_ttl_minutes", int, source)

    key_prefix = defaults.key_prefix
    if "key_prefix" in data:
        key_prefix = _expect(data, "key_prefix", str, source)
        if not _KEY_PREFIX.fullmatch(key_prefix):
            raise ValueError(
                f"'key_prefix' in {source} may only contain letters, digits, '_', '.' or '-',"
                f" got {key_prefix!r}"
            )

    icon_fields = defaults.icon_reference_fields
    if "icon_reference_fields" in data:
        raw_fields = _expect(data, "icon_reference_fields", list, source)
        if not all(isinstance(name, str) for name in raw_fields):
            raise ValueError(f"'icon_reference_fields' in {source} must be a list of strings")
        icon_fields = tuple(raw_fields)

    return SiteStoreConfig(
        store_dir=store_dir,
        key_prefix=key_prefix,
        default_theme_id=(
            _expect(data, "default_theme_id", str, source)
            if "default_theme_id" in data
            else defaults.default_theme_id
        ),
        recent_limit=recent_limit,
        default_cache_ttl_minutes=ttl,
        duplicate_url_invalidates=(
            _expect(data, "duplicate_url_invalidates", bool, source)
            if "duplicate_url_invalidates" in data
            else defaults.duplicate_url_invalidates
        ),
        icon_reference_fields=icon_fields,
    )


class ConfigOps(ABC):
    """Abstract interface for config access.

    Enables in-memory implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if a config file exists."""
        ...

    @abstractmethod
    def load(self) -> SiteStoreConfig:
        """Load config, falling back to defaults when none exists.

        Raises:
            ValueError: If the config is malformed
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for error messages and debugging)."""
        ...


class FilesystemConfigOps(ConfigOps):
    """Production implementation that reads config.toml from the sitestore home."""

    def __init__(self, home: Path | None = None) -> None:
        self._home = home

    def path(self) -> Path:
        home = self._home if self._home is not None else sitestore_home()
        return home / "config.toml"

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> SiteStoreConfig:
        config_path = self.path()
        if not config_path.exists():
            return SiteStoreConfig()
        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Malformed config at {config_path}: {e}") from e
        return parse_config(data, config_path)


class InMemoryConfigOps(ConfigOps):
    """Test implementation holding a config object in memory."""

    def __init__(self, config: SiteStoreConfig | None = None) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/test/sitestore/config.toml")

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> SiteStoreConfig:
        return self._config if self._config is not None else SiteStoreConfig()
