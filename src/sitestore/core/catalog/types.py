"""Catalog entity models shared by the icon, section and theme registries."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sitestore.core.codec import timestamp_from_text


class EntityKind(str, Enum):
    """Explicit tag carried by every catalog entity."""

    ICON = "icon"
    SECTION = "section"
    THEME = "theme"


IconCategory = Literal[
    "general",
    "business",
    "technology",
    "communication",
    "media",
    "navigation",
    "actions",
    "weather",
    "food",
    "security",
]

SectionCategory = Literal[
    "headers",
    "heroes",
    "about",
    "services",
    "features",
    "pricing",
    "testimonials",
    "portfolio",
    "contact",
    "footers",
    "cta",
    "blog",
]

ThemeCategory = Literal["modern", "classic", "minimal", "bold", "elegant"]

# Accepts datetimes and the bare ISO text older archives stored.
Timestamp = Annotated[datetime, BeforeValidator(timestamp_from_text)]


class DocumentModel(BaseModel):
    """Base for persisted models: camelCase on disk, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        """Dump to the camelCase document shape used in storage."""
        return self.model_dump(by_alias=True, mode="python")


class CatalogEntity(DocumentModel):
    """Fields common to every registry entity.

    Fields:
        id: Unique within its registry (last write wins)
        kind: Explicit entity kind tag (see EntityKind)
        name: Display name
        category: Closed per registry kind (narrowed by subclasses)
        keywords: Search terms
        is_built_in: True for entities regenerated from the fixed catalog
        is_premium: Premium-only entity
        usage: Selection counter, never negative
        created_at: Creation time (regenerated for built-ins at startup)
    """

    id: str
    kind: str
    name: str
    category: str
    keywords: list[str] = Field(default_factory=list)
    is_built_in: bool = False
    is_premium: bool = False
    usage: int = Field(default=0, ge=0)
    created_at: Timestamp | None = None

    def search_terms(self) -> list[str]:
        """Text matched by registry search besides the name."""
        return list(self.keywords)


class IconEntity(CatalogEntity):
    kind: Literal["icon"] = "icon"
    category: IconCategory


class SectionEntity(CatalogEntity):
    """A reusable content section template."""

    kind: Literal["section"] = "section"
    category: SectionCategory
    type: str
    description: str = ""
    thumbnail: str = ""
    icon_id: str = ""
    tags: list[str] = Field(default_factory=list)
    default_content: dict[str, Any] = Field(default_factory=dict)
    required_icons: list[str] = Field(default_factory=list)
    rating: float = 0.0
    downloads: int = Field(default=0, ge=0)
    updated_at: Timestamp | None = None

    def search_terms(self) -> list[str]:
        return [self.description, *self.tags, *self.keywords]


class ThemeEntity(CatalogEntity):
    """A colour, type and spacing palette applied to a whole project."""

    kind: Literal["theme"] = "theme"
    category: ThemeCategory
    colors: dict[str, str] = Field(default_factory=dict)
    fonts: dict[str, str] = Field(default_factory=dict)
    shadows: dict[str, str] = Field(default_factory=dict)
    border_radius: dict[str, str] = Field(default_factory=dict)
    spacing: dict[str, str] = Field(default_factory=dict)
    typography: dict[str, str | int | float] = Field(default_factory=dict)
    animations: dict[str, str] = Field(default_factory=dict)
    updated_at: Timestamp | None = None
