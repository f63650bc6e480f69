"""
Text helpers for loosely-typed song metadata.

Song files come from several generators, and fields such as title and
artist are not always strings.
"""

import json
from typing import Any

# Keys tried, in order, when a metadata field is an object
DISPLAY_KEYS = ("en", "default", "name")


def coerce_to_display_string(value: Any, fallback: str) -> str:
    """Best-effort conversion of a metadata field to display text.

    Fallback order: None -> ``fallback``; str as-is; numbers via ``str``;
    lists joined with ", "; objects via their ``en``/``default``/``name``
    key, else as JSON; anything else via ``str``.
    """
    if value is None:
        return fallback
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        for key in DISPLAY_KEYS:
            if value.get(key):
                return coerce_to_display_string(value[key], fallback)
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def parse_duration(value: Any) -> float:
    """Parse a duration field, falling back to 0.0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
