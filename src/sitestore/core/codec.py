"""JSON codec with explicit timestamp tagging.

Timestamps are written as ``{"__type": "Date", "value": "<ISO-8601>"}`` so they
can be told apart from plain strings, and only the tagged form is turned back
into a datetime on read. Archives written before the tag existed stored bare
ISO strings; those are parsed by the record models, whose timestamp fields run
``timestamp_from_text`` before validation. Bare strings anywhere else stay text.
"""

import json
from datetime import UTC, datetime
from typing import Any

TYPE_FIELD = "__type"
DATE_TAG = "Date"


def format_timestamp(value: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with millisecond precision.

    Naive datetimes are taken to be UTC already.

    Example:
        >>> format_timestamp(datetime(2024, 1, 15, 12, 0, tzinfo=UTC))
        '2024-01-15T12:00:00.000Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    iso = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime, or None if invalid."""
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def timestamp_from_text(value: Any) -> Any:
    """Turn ISO-8601 text into an aware datetime; pass anything else through.

    Unparseable text is returned unchanged so the caller's validation reports it.
    """
    if isinstance(value, str):
        parsed = parse_timestamp(value)
        return parsed if parsed is not None else value
    return value


def _tag_timestamps(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return {TYPE_FIELD: DATE_TAG, "value": format_timestamp(obj)}
    if isinstance(obj, dict):
        return {key: _tag_timestamps(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_tag_timestamps(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return [_tag_timestamps(item) for item in sorted(obj)]
    return obj


def _revive_timestamps(obj: Any) -> Any:
    if isinstance(obj, dict):
        if obj.get(TYPE_FIELD) == DATE_TAG and isinstance(obj.get("value"), str):
            revived = parse_timestamp(obj["value"])
            return revived if revived is not None else obj["value"]
        return {key: _revive_timestamps(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_revive_timestamps(item) for item in obj]
    return obj


def encode_json(data: Any, *, indent: int | None = None) -> str:
    """Serialize data to JSON text, tagging every datetime.

    Args:
        data: Plain JSON-compatible structure that may contain datetimes
        indent: Optional indentation for human-readable output

    Returns:
        JSON text

    Raises:
        TypeError: If data contains a value JSON cannot represent
        ValueError: If data contains a circular reference
    """
    return json.dumps(_tag_timestamps(data), indent=indent, ensure_ascii=False)


def decode_json(text: str) -> Any:
    """Parse JSON text, rehydrating tagged timestamps.

    Raises:
        json.JSONDecodeError: If text is not valid JSON
    """
    return _revive_timestamps(json.loads(text))
