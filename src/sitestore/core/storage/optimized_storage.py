"""User-level state on top of the catalog registries.

OptimizedStorage owns projects, settings, selection counts, the profile and a
TTL cache. It stores catalog entities by id only and resolves ids through the
registries on read, silently dropping ids that no longer resolve.

Every operation degrades instead of raising: unreadable data reads as the
default value and failed writes are logged by JsonDocumentStore.
"""

import json
import logging
from datetime import timedelta
from typing import Any

from pydantic import ValidationError

from sitestore.core.catalog.icons import IconRegistry
from sitestore.core.catalog.registry import Registry
from sitestore.core.catalog.sections import SectionRegistry
from sitestore.core.catalog.themes import ThemeRegistry
from sitestore.core.catalog.types import IconEntity, SectionEntity, ThemeEntity
from sitestore.core.codec import decode_json, encode_json
from sitestore.core.config import SiteStoreConfig
from sitestore.core.persistence import JsonDocumentStore
from sitestore.core.storage.content import instance_icon_references
from sitestore.core.storage.types import (
    DEFAULT_PREFERENCES,
    EXPORT_FORMAT_VERSION,
    CacheEntry,
    StoredProject,
    UsageAnalytics,
    UserProfile,
    UserSettings,
)
from sitestore.core.storage_keys import StorageKeys
from sitestore.integrations.time.abc import Time

logger = logging.getLogger(__name__)

ANALYTICS_TOP_N = 10


class ImportRejectedError(ValueError):
    """Raised internally when an import document fails validation."""


def _count_map(stored: Any) -> dict[str, int]:
    if not isinstance(stored, dict):
        return {}
    return {
        key: value
        for key, value in stored.items()
        if isinstance(value, int) and not isinstance(value, bool)
    }


def _top_ids(counts: dict[str, int], limit: int) -> list[str]:
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [entity_id for entity_id, _ in ranked[:limit]]


def _find_raw_project(raw_projects: list[Any], project_id: str) -> int | None:
    for index, raw in enumerate(raw_projects):
        if isinstance(raw, dict) and raw.get("id") == project_id:
            return index
    return None


class OptimizedStorage:
    """Projects, settings, recents, favorites, cache and analytics."""

    def __init__(
        self,
        *,
        documents: JsonDocumentStore,
        time: Time,
        keys: StorageKeys,
        config: SiteStoreConfig,
        icons: IconRegistry,
        sections: SectionRegistry,
        themes: ThemeRegistry,
    ) -> None:
        self._documents = documents
        self._time = time
        self._keys = keys
        self._config = config
        self._icons = icons
        self._sections = sections
        self._themes = themes

    @property
    def icons(self) -> IconRegistry:
        return self._icons

    @property
    def sections(self) -> SectionRegistry:
        return self._sections

    @property
    def themes(self) -> ThemeRegistry:
        return self._themes

    @property
    def keys(self) -> StorageKeys:
        return self._keys

    def _registries(self) -> list[Registry[Any]]:
        return [self._themes, self._icons, self._sections]

    # Lifecycle

    def initialize(self) -> None:
        """Initialize the registries, then load persisted usage into them.

        Registries never load their own usage maps; this is the single place
        where stored usage is reconciled with registry entities.
        """
        for registry in self._registries():
            registry.initialize()
        for registry in self._registries():
            stored = self._documents.load(registry.usage_key)
            if not isinstance(stored, dict):
                continue
            applied = registry.apply_usage(stored)
            logger.debug(f"Reconciled {applied} usage entries from '{registry.usage_key}'")

    def clear_all_data(self) -> None:
        """Factory reset: remove every key, then rebuild registries from built-ins."""
        for key in self._keys.all_keys():
            self._documents.remove(key)
        for registry in self._registries():
            registry.reset()
            registry.initialize()
        logger.debug("Cleared all stored data")

    # Projects

    def get_all_projects(self) -> list[StoredProject]:
        projects: list[StoredProject] = []
        for raw in self._load_raw_projects():
            project = self._validate_raw_project(raw)
            if project is not None:
                projects.append(project)
        return projects

    def get_project(self, project_id: str) -> StoredProject | None:
        for project in self.get_all_projects():
            if project.id == project_id:
                return project
        return None

    def save_project(self, project: StoredProject) -> StoredProject:
        """Insert or replace a project by id, then record its content as recently used.

        Replacing stamps ``updated_at`` and keeps the stored ``created_at`` when none
        is given; inserting fills any missing timestamps.
        Every section instance marks its section as recently used, and every
        icon reference in its content marks that icon as recently used.
        Stored entries that fail validation are written back unchanged.

        Returns:
            The project as stored
        """
        now = self._time.now()
        raw_projects = self._load_raw_projects()
        index = _find_raw_project(raw_projects, project.id)
        if index is not None:
            existing = self._validate_raw_project(raw_projects[index])
            created_at = project.created_at or (existing.created_at if existing else None)
            stored = project.model_copy(update={"created_at": created_at, "updated_at": now})
            raw_projects[index] = stored.to_document()
        else:
            stored = project.model_copy(
                update={
                    "created_at": project.created_at or now,
                    "updated_at": project.updated_at or now,
                }
            )
            raw_projects.append(stored.to_document())

        self._documents.save(self._keys.projects, raw_projects)
        self._track_project_content(stored)
        return stored

    def delete_project(self, project_id: str) -> bool:
        raw_projects = self._load_raw_projects()
        index = _find_raw_project(raw_projects, project_id)
        if index is None:
            return False
        del raw_projects[index]
        self._documents.save(self._keys.projects, raw_projects)
        return True

    def update_project_theme(self, project_id: str, theme_id: str) -> bool:
        """Point a project at another theme without touching recency tracking.

        Returns:
            True if the project exists and is valid
        """
        raw_projects = self._load_raw_projects()
        index = _find_raw_project(raw_projects, project_id)
        if index is None:
            return False
        project = self._validate_raw_project(raw_projects[index])
        if project is None:
            return False
        raw_projects[index] = project.model_copy(
            update={"theme_id": theme_id, "updated_at": self._time.now()}
        ).to_document()
        self._documents.save(self._keys.projects, raw_projects)
        return True

    def _load_raw_projects(self) -> list[Any]:
        stored = self._documents.load(self._keys.projects)
        return stored if isinstance(stored, list) else []

    def _validate_raw_project(self, raw: Any) -> StoredProject | None:
        try:
            return StoredProject.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping invalid project in '{self._keys.projects}': {e}")
            return None

    def _track_project_content(self, project: StoredProject) -> None:
        for instance in project.sections:
            self.add_to_recently_used_sections(instance.section_id)
            for icon_id in instance_icon_references(
                instance, self._config.icon_reference_fields
            ):
                self.add_to_recently_used_icons(icon_id)

    # Settings and profile

    def _default_settings(self) -> UserSettings:
        return UserSettings(
            selected_theme_id=self._config.default_theme_id,
            preferences=dict(DEFAULT_PREFERENCES),
        )

    def get_user_settings(self) -> UserSettings:
        """Stored settings shallow-merged over the defaults."""
        defaults = self._default_settings()
        stored = self._documents.load(self._keys.user_settings)
        if not isinstance(stored, dict):
            return defaults
        merged = {**defaults.to_document(), **stored}
        try:
            return UserSettings.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Invalid '{self._keys.user_settings}', using defaults: {e}")
            return defaults

    def save_user_settings(self, settings: UserSettings) -> bool:
        return self._documents.save(self._keys.user_settings, settings.to_document())

    def get_user_profile(self) -> UserProfile | None:
        stored = self._documents.load(self._keys.user_profile)
        if not isinstance(stored, dict):
            return None
        try:
            return UserProfile.model_validate(stored)
        except ValidationError as e:
            logger.warning(f"Invalid '{self._keys.user_profile}', ignoring: {e}")
            return None

    def save_user_profile(self, profile: UserProfile) -> bool:
        return self._documents.save(self._keys.user_profile, profile.to_document())

    # Themes

    def get_selected_theme(self) -> ThemeEntity | None:
        return self._themes.get(self.get_user_settings().selected_theme_id)

    def set_selected_theme(self, theme_id: str) -> None:
        settings = self.get_user_settings()
        settings.selected_theme_id = theme_id
        self.save_user_settings(settings)
        self._themes.increment_usage(theme_id)
        self._track_selection(self._keys.theme_selections, theme_id)

    def get_theme_selections(self) -> dict[str, int]:
        return _count_map(self._documents.load(self._keys.theme_selections))

    # Icons

    def get_recently_used_icons(self) -> list[IconEntity]:
        return self._resolve(self._icons, self.get_user_settings().recently_used_icons)

    def get_favorite_icons(self) -> list[IconEntity]:
        return self._resolve(self._icons, self.get_user_settings().favorite_icons)

    def add_to_recently_used_icons(self, icon_id: str) -> None:
        settings = self.get_user_settings()
        settings.recently_used_icons = self._push_recent(settings.recently_used_icons, icon_id)
        self.save_user_settings(settings)
        self._icons.increment_usage(icon_id)
        self._track_selection(self._keys.icon_selections, icon_id)

    def toggle_favorite_icon(self, icon_id: str) -> bool:
        """Add or remove an icon from favorites. Returns True if it is now a favorite."""
        settings = self.get_user_settings()
        settings.favorite_icons, is_favorite = self._toggle(settings.favorite_icons, icon_id)
        self.save_user_settings(settings)
        return is_favorite

    def get_icon_selections(self) -> dict[str, int]:
        return _count_map(self._documents.load(self._keys.icon_selections))

    # Sections

    def get_recently_used_sections(self) -> list[SectionEntity]:
        return self._resolve(self._sections, self.get_user_settings().recently_used_sections)

    def get_favorite_sections(self) -> list[SectionEntity]:
        return self._resolve(self._sections, self.get_user_settings().favorite_sections)

    def add_to_recently_used_sections(self, section_id: str) -> None:
        settings = self.get_user_settings()
        settings.recently_used_sections = self._push_recent(
            settings.recently_used_sections, section_id
        )
        self.save_user_settings(settings)
        self._sections.increment_usage(section_id)
        self._track_selection(self._keys.section_selections, section_id)

    def toggle_favorite_section(self, section_id: str) -> bool:
        """Add or remove a section from favorites. Returns True if it is now a favorite."""
        settings = self.get_user_settings()
        settings.favorite_sections, is_favorite = self._toggle(
            settings.favorite_sections, section_id
        )
        self.save_user_settings(settings)
        return is_favorite

    def get_section_selections(self) -> dict[str, int]:
        return _count_map(self._documents.load(self._keys.section_selections))

    # Reference list helpers

    def _push_recent(self, recent: list[str], entity_id: str) -> list[str]:
        # Most recent first, no duplicates, bounded
        moved = [entity_id, *(other for other in recent if other != entity_id)]
        return moved[: self._config.recent_limit]

    def _toggle(self, favorites: list[str], entity_id: str) -> tuple[list[str], bool]:
        if entity_id in favorites:
            return [other for other in favorites if other != entity_id], False
        return [*favorites, entity_id], True

    def _resolve(self, registry: Registry[Any], entity_ids: list[str]) -> list[Any]:
        resolved = (registry.get(entity_id) for entity_id in entity_ids)
        return [entity for entity in resolved if entity is not None]

    def _track_selection(self, key: str, entity_id: str) -> None:
        counts = _count_map(self._documents.load(key))
        counts[entity_id] = counts.get(entity_id, 0) + 1
        self._documents.save(key, counts)

    # Cache

    def _load_cache(self) -> dict[str, CacheEntry]:
        stored = self._documents.load(self._keys.cache)
        if not isinstance(stored, dict):
            return {}
        entries: dict[str, CacheEntry] = {}
        for cache_key, raw in stored.items():
            if not isinstance(raw, dict):
                continue
            try:
                entries[cache_key] = CacheEntry.model_validate({"key": cache_key, **raw})
            except ValidationError as e:
                logger.warning(f"Dropping invalid cache entry '{cache_key}': {e}")
        return entries

    def _save_cache(self, entries: dict[str, CacheEntry]) -> None:
        documents = {cache_key: entry.to_document() for cache_key, entry in entries.items()}
        self._documents.save(self._keys.cache, documents)

    def get_cache(self, key: str) -> Any | None:
        """Cached data for key, or None if absent or expired.

        An expired entry is evicted by this read; nothing else sweeps the cache.
        """
        entries = self._load_cache()
        entry = entries.get(key)
        if entry is None:
            return None
        if self._time.now() >= entry.expiry:
            del entries[key]
            self._save_cache(entries)
            logger.debug(f"Evicted expired cache entry '{key}'")
            return None
        return entry.data

    def set_cache(self, key: str, data: Any, ttl_minutes: int | None = None) -> None:
        if ttl_minutes is None:
            ttl_minutes = self._config.default_cache_ttl_minutes
        now = self._time.now()
        entries = self._load_cache()
        entries[key] = CacheEntry(
            key=key,
            data=data,
            expiry=now + timedelta(minutes=ttl_minutes),
            created=now,
        )
        self._save_cache(entries)

    def clear_cache(self) -> None:
        self._documents.save(self._keys.cache, {})

    def cache_keys(self) -> list[str]:
        """Keys currently held in the cache, expired or not."""
        return list(self._load_cache())

    # Analytics

    def get_usage_analytics(self) -> UsageAnalytics:
        """Aggregate counts from the selection maps and stored projects."""
        projects = self.get_all_projects()
        theme_counts = self.get_theme_selections()
        top_theme = _top_ids(theme_counts, 1)
        return UsageAnalytics(
            total_projects=len(projects),
            total_sections=sum(len(project.sections) for project in projects),
            most_used_theme=top_theme[0] if top_theme else self._config.default_theme_id,
            most_used_icons=_top_ids(self.get_icon_selections(), ANALYTICS_TOP_N),
            most_used_sections=_top_ids(self.get_section_selections(), ANALYTICS_TOP_N),
            storage_usage=self.storage_usage(),
        )

    def storage_usage(self) -> int:
        """Estimated bytes held under the storage keys."""
        return sum(self._documents.size_of(key) for key in self._keys.storage_keys())

    # Export / import

    def export_data(self) -> str:
        """Serialize projects, settings and selection counts as one JSON document."""
        document = {
            "projects": [project.to_document() for project in self.get_all_projects()],
            "userSettings": self.get_user_settings().to_document(),
            "themeSelections": self.get_theme_selections(),
            "iconSelections": self.get_icon_selections(),
            "sectionSelections": self.get_section_selections(),
            "exportedAt": self._time.now(),
            "version": EXPORT_FORMAT_VERSION,
        }
        return encode_json(document, indent=2)

    def import_data(self, json_data: str) -> bool:
        """Apply an exported document. Only sections present in it are written.

        The whole document is parsed and validated before the first write, so
        a rejected document leaves stored data untouched.

        Returns:
            True if the document was accepted and every write succeeded
        """
        try:
            writes = self._prepare_import(json_data)
        except (json.JSONDecodeError, ImportRejectedError) as e:
            logger.error(f"Rejected import: {e}")
            return False

        results = [self._documents.save(key, value) for key, value in writes]
        return all(results)

    def _prepare_import(self, json_data: str) -> list[tuple[str, Any]]:
        data = decode_json(json_data)
        if not isinstance(data, dict):
            raise ImportRejectedError("document must be a JSON object")

        writes: list[tuple[str, Any]] = []
        if data.get("projects") is not None:
            if not isinstance(data["projects"], list):
                raise ImportRejectedError("'projects' must be a list")
            try:
                projects = [StoredProject.model_validate(raw) for raw in data["projects"]]
            except ValidationError as e:
                raise ImportRejectedError(f"invalid project: {e}") from e
            writes.append((self._keys.projects, [p.to_document() for p in projects]))

        if data.get("userSettings") is not None:
            if not isinstance(data["userSettings"], dict):
                raise ImportRejectedError("'userSettings' must be an object")
            merged = {**self._default_settings().to_document(), **data["userSettings"]}
            try:
                settings = UserSettings.model_validate(merged)
            except ValidationError as e:
                raise ImportRejectedError(f"invalid user settings: {e}") from e
            writes.append((self._keys.user_settings, settings.to_document()))

        for field_name, key in (
            ("themeSelections", self._keys.theme_selections),
            ("iconSelections", self._keys.icon_selections),
            ("sectionSelections", self._keys.section_selections),
        ):
            if data.get(field_name) is None:
                continue
            if not isinstance(data[field_name], dict):
                raise ImportRejectedError(f"'{field_name}' must be an object")
            writes.append((key, _count_map(data[field_name])))
        return writes
