"""Persisted key names shared by the storage layer and the registries."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageKeys:
    """Key names used in the key-value store.

    The names are part of the storage contract. A prefix can namespace them
    when several applications share one store (a browser deployment
    used ``templates_uz_``).
    """

    prefix: str = ""

    def _key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    @property
    def projects(self) -> str:
        return self._key("projects")

    @property
    def user_settings(self) -> str:
        return self._key("user_settings")

    @property
    def user_profile(self) -> str:
        return self._key("user_profile")

    @property
    def theme_selections(self) -> str:
        return self._key("theme_selections")

    @property
    def icon_selections(self) -> str:
        return self._key("icon_selections")

    @property
    def section_selections(self) -> str:
        return self._key("section_selections")

    @property
    def cache(self) -> str:
        return self._key("cache")

    @property
    def custom_icons(self) -> str:
        return self._key("custom_icons")

    @property
    def custom_sections(self) -> str:
        return self._key("custom_sections")

    @property
    def custom_themes(self) -> str:
        return self._key("custom_themes")

    @property
    def icon_usage(self) -> str:
        return self._key("icon_usage")

    @property
    def section_usage(self) -> str:
        return self._key("section_usage")

    @property
    def theme_usage(self) -> str:
        return self._key("theme_usage")

    def storage_keys(self) -> list[str]:
        """Keys owned by the storage layer itself (used for size estimates)."""
        return [
            self.projects,
            self.user_settings,
            self.user_profile,
            self.theme_selections,
            self.icon_selections,
            self.section_selections,
            self.cache,
        ]

    def registry_keys(self) -> list[str]:
        """Keys owned by the catalog registries."""
        return [
            self.custom_icons,
            self.custom_sections,
            self.custom_themes,
            self.icon_usage,
            self.section_usage,
            self.theme_usage,
        ]

    def all_keys(self) -> list[str]:
        return self.storage_keys() + self.registry_keys()
