"""Typed icon references inside section instance content.

Content is free-form, so icon ids are recognised structurally rather than by
sniffing field names. A value is an icon reference when it is either

- a tagged node ``{"__type": "IconRef", "value": "<icon id>"}``, or
- a string stored under a field named exactly one of the configured icon
  reference fields (``iconId``, ``primaryIconId``, ...).

A field such as ``iconColor`` or ``backgroundIcon`` is not a reference unless
it is listed.
"""

from collections.abc import Iterable, Iterator
from typing import Any

from sitestore.core.codec import TYPE_FIELD
from sitestore.core.storage.types import SectionInstance

ICON_REF_TAG = "IconRef"


def icon_ref(icon_id: str) -> dict[str, str]:
    """Build a tagged icon reference node for section content."""
    return {TYPE_FIELD: ICON_REF_TAG, "value": icon_id}


def is_icon_ref(node: Any) -> bool:
    return (
        isinstance(node, dict)
        and node.get(TYPE_FIELD) == ICON_REF_TAG
        and isinstance(node.get("value"), str)
    )


def iter_icon_references(node: Any, field_names: Iterable[str]) -> Iterator[str]:
    """Yield icon ids found anywhere in a content tree, in document order.

    Args:
        node: Content value (mapping, sequence or scalar)
        field_names: Field names whose string values are icon ids
    """
    names = frozenset(field_names)
    yield from _walk(node, names)


def _walk(node: Any, names: frozenset[str]) -> Iterator[str]:
    if is_icon_ref(node):
        yield node["value"]
        return
    if isinstance(node, dict):
        for key, value in node.items():
            if key in names and isinstance(value, str):
                yield value
            else:
                yield from _walk(value, names)
    elif isinstance(node, (list, tuple)):
        for item in node:
            yield from _walk(item, names)


def instance_icon_references(
    instance: SectionInstance, field_names: Iterable[str]
) -> list[str]:
    """All icon ids a section instance refers to: content first, then custom icons."""
    references = list(iter_icon_references(instance.data, field_names))
    if instance.custom_icons:
        references.extend(instance.custom_icons.values())
    return references
