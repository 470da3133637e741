"""User-owned records persisted by OptimizedStorage.

Records reference catalog entities by id only; no entity is ever embedded.
"""

from typing import Any

from pydantic import Field

from sitestore.core.catalog.types import DocumentModel, Timestamp

EXPORT_FORMAT_VERSION = "2.0.0"

DEFAULT_PREFERENCES: dict[str, Any] = {
    "autoSave": True,
    "showGrid": False,
    "snapToGrid": True,
    "language": "en",
    "timezone": "UTC",
}


class SectionInstance(DocumentModel):
    """A section template placed in a project, with its own content.

    Fields:
        id: Unique instance id
        section_id: Reference into the section registry (may dangle)
        data: Free-form content; icon references are found structurally
        order: Position within the project
        theme_id: Optional per-section theme override
        custom_icons: Optional slot -> icon id mapping
    """

    id: str
    section_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    order: int = 0
    theme_id: str | None = None
    custom_icons: dict[str, str] | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class StoredProject(DocumentModel):
    id: str
    name: str
    description: str | None = None
    website_url: str = ""
    category: str = ""
    seo_keywords: list[str] = Field(default_factory=list)
    logo: str | None = None
    favicon: str | None = None
    theme_id: str = ""
    sections: list[SectionInstance] = Field(default_factory=list)
    is_published: bool = False
    publish_url: str | None = None
    thumbnail: str | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class UserSettings(DocumentModel):
    """Per-user picker state.

    Recency lists are most-recent-first, bounded and duplicate-free; the
    bound is enforced by OptimizedStorage, not by the model.
    """

    selected_theme_id: str
    favorite_icons: list[str] = Field(default_factory=list)
    favorite_sections: list[str] = Field(default_factory=list)
    recently_used_icons: list[str] = Field(default_factory=list)
    recently_used_sections: list[str] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_PREFERENCES))


class UserProfile(DocumentModel):
    id: str
    email: str
    name: str
    avatar: str | None = None
    company: str | None = None
    website: str | None = None
    bio: str | None = None
    created_at: Timestamp | None = None
    last_login_at: Timestamp | None = None


class CacheEntry(DocumentModel):
    """Cached value; reads at or after ``expiry`` treat it as absent and evict it."""

    key: str
    data: Any = None
    expiry: Timestamp
    created: Timestamp


class UsageAnalytics(DocumentModel):
    total_projects: int
    total_sections: int
    most_used_theme: str
    most_used_icons: list[str]
    most_used_sections: list[str]
    storage_usage: int
