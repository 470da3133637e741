"""Generic catalog of built-in plus user-added entities of one kind.

A registry regenerates its built-ins at every initialization and persists only
two things: the custom (non-built-in) entities as one JSON array, and a small
usage map. Selecting an entity therefore rewrites the usage map only, never
the whole catalog.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from sitestore.core.catalog.types import CatalogEntity
from sitestore.core.persistence import JsonDocumentStore
from sitestore.integrations.time.abc import Time

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=CatalogEntity)

DEFAULT_POPULAR_LIMIT = 20

# Fields an update may never change
_PROTECTED_FIELDS = frozenset({"id", "isBuiltIn", "kind", "createdAt"})


class Registry(ABC, Generic[EntityT]):
    """In-memory catalog with category index, search and usage tracking.

    Subclasses provide the built-in catalog and the entity model; everything
    else is shared by the icon, section and theme registries.
    """

    entity_type: type[EntityT]

    def __init__(
        self,
        documents: JsonDocumentStore,
        time: Time,
        *,
        custom_key: str,
        usage_key: str,
    ) -> None:
        """Create a registry.

        Args:
            documents: JSON document access over the key-value store
            time: Clock used to stamp created/updated times
            custom_key: Key holding the custom entity array
            usage_key: Key holding the usage map
        """
        self._documents = documents
        self._time = time
        self._custom_key = custom_key
        self._usage_key = usage_key
        self._entities: dict[str, EntityT] = {}
        self._categories: dict[str, list[str]] = {}
        self._initialized = False

    @property
    def custom_key(self) -> str:
        return self._custom_key

    @property
    def usage_key(self) -> str:
        return self._usage_key

    @property
    def initialized(self) -> bool:
        return self._initialized

    @abstractmethod
    def _built_in_entities(self) -> list[EntityT]:
        """Build the fixed catalog, in display order."""
        ...

    # Lifecycle

    def initialize(self) -> None:
        """Load built-ins, then persisted customs, then index categories.

        Calling it again is a no-op.
        """
        if self._initialized:
            return
        for entity in self._built_in_entities():
            self._entities[entity.id] = entity
        for entity in self._load_custom_entities():
            self._entities[entity.id] = entity
        self._rebuild_categories()
        self._initialized = True
        logger.debug(
            f"{type(self).__name__} initialized with {len(self._entities)} entities "
            f"in {len(self._categories)} categories"
        )

    def reset(self) -> None:
        """Drop all in-memory state so the next initialize() starts fresh."""
        self._entities = {}
        self._categories = {}
        self._initialized = False

    def _load_custom_entities(self) -> list[EntityT]:
        stored = self._documents.load(self._custom_key)
        if not isinstance(stored, list):
            return []
        entities: list[EntityT] = []
        for raw in stored:
            try:
                entity = self.entity_type.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping invalid entry in '{self._custom_key}': {e}")
                continue
            entities.append(entity.model_copy(update={"is_built_in": False}))
        return entities

    def _rebuild_categories(self) -> None:
        self._categories = {}
        for entity in self._entities.values():
            self._categories.setdefault(entity.category, []).append(entity.id)

    # Queries

    def get_all(self) -> list[EntityT]:
        return list(self._entities.values())

    def get(self, entity_id: str) -> EntityT | None:
        return self._entities.get(entity_id)

    def get_by_category(self, category: str) -> list[EntityT]:
        return [entity for entity in self._entities.values() if entity.category == category]

    def search(self, query: str, category: str | None = None) -> list[EntityT]:
        """Case-insensitive substring search over name and search terms.

        Results keep catalog order; there is no relevance ranking. An empty
        query matches everything.

        Args:
            query: Text to look for
            category: Optional category filter

        Returns:
            Matching entities
        """
        needle = query.lower()
        results: list[EntityT] = []
        for entity in self._entities.values():
            if category is not None and entity.category != category:
                continue
            if not needle or needle in entity.name.lower():
                results.append(entity)
            elif any(needle in term.lower() for term in entity.search_terms()):
                results.append(entity)
        return results

    def get_categories(self) -> list[str]:
        return list(self._categories)

    def get_category_count(self, category: str) -> int:
        return len(self._categories.get(category, []))

    def get_popular(self, limit: int = DEFAULT_POPULAR_LIMIT) -> list[EntityT]:
        """Entities by descending usage; ties keep catalog order."""
        ranked = sorted(self._entities.values(), key=lambda entity: entity.usage, reverse=True)
        return ranked[:limit]

    # Usage

    def increment_usage(self, entity_id: str) -> None:
        """Bump the usage counter and persist the usage map. Unknown ids are ignored."""
        entity = self._entities.get(entity_id)
        if entity is None:
            return
        self._bump_usage(entity)
        self._save_usage()

    def _bump_usage(self, entity: EntityT) -> None:
        entity.usage += 1

    def _usage_entry(self, entity: EntityT) -> Any:
        return entity.usage

    def _apply_usage_entry(self, entity: EntityT, value: Any) -> None:
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            entity.usage = value

    def usage_map(self) -> dict[str, Any]:
        """Persisted usage shape: only entities with non-zero usage."""
        return {
            entity_id: self._usage_entry(entity)
            for entity_id, entity in self._entities.items()
            if entity.usage > 0
        }

    def apply_usage(self, usage: dict[str, Any]) -> int:
        """Overwrite usage counters from a persisted usage map.

        Ids that are not in the catalog are skipped.

        Returns:
            Number of entities updated
        """
        applied = 0
        for entity_id, value in usage.items():
            entity = self._entities.get(entity_id)
            if entity is None:
                continue
            self._apply_usage_entry(entity, value)
            applied += 1
        return applied

    def _save_usage(self) -> None:
        self._documents.save(self._usage_key, self.usage_map())

    # Custom entities

    def _stamp_new(self, entity: EntityT) -> EntityT:
        now = self._time.now()
        updates: dict[str, Any] = {"is_built_in": False, "created_at": now}
        if "updated_at" in type(entity).model_fields:
            updates["updated_at"] = now
        return entity.model_copy(update=updates)

    def add_custom(self, entity: EntityT) -> EntityT:
        """Insert or overwrite a custom entity.

        The entity is stamped as not built-in with a fresh creation time. An id
        equal to a built-in id shadows the built-in.

        Returns:
            The stored entity
        """
        stored = self._stamp_new(entity)
        self._entities[stored.id] = stored
        self._rebuild_categories()
        self._save_custom_entities()
        return stored

    def update(self, entity_id: str, changes: dict[str, Any]) -> bool:
        """Apply a partial update to a custom entity.

        Built-in and unknown ids are left untouched. Keys may be given in
        snake_case or camelCase; id, kind, isBuiltIn and createdAt cannot change.

        Returns:
            True if the entity was updated
        """
        entity = self._entities.get(entity_id)
        if entity is None or entity.is_built_in:
            return False

        model = type(entity)
        merged = entity.to_document()
        for key, value in changes.items():
            field = model.model_fields.get(key)
            alias = field.alias if field is not None and field.alias else key
            if alias in _PROTECTED_FIELDS:
                continue
            merged[alias] = value
        if "updated_at" in model.model_fields:
            merged["updatedAt"] = self._time.now()

        try:
            updated = model.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Rejected update to '{entity_id}': {e}")
            return False

        self._entities[entity_id] = updated
        self._rebuild_categories()
        self._save_custom_entities()
        return True

    def delete(self, entity_id: str) -> bool:
        """Delete a custom entity. Built-in and unknown ids are left untouched.

        Returns:
            True if the entity was deleted
        """
        entity = self._entities.get(entity_id)
        if entity is None or entity.is_built_in:
            return False
        del self._entities[entity_id]
        self._rebuild_categories()
        self._save_custom_entities()
        return True

    def custom_entities(self) -> list[EntityT]:
        return [entity for entity in self._entities.values() if not entity.is_built_in]

    def _save_custom_entities(self) -> None:
        documents = [entity.to_document() for entity in self.custom_entities()]
        self._documents.save(self._custom_key, documents)
