"""Helpers for reading the backend's loosely typed JSON documents."""
import math
from typing import Any, Optional


def pick_id(data: Optional[dict]) -> str:
    """Return the document identifier, accepting both `id` and Mongo-style `_id`."""
    if not data:
        return ''
    value = data.get('id') or data.get('_id') or ''
    return str(value)


def to_float(value: Any, default: float = 0.0) -> float:
    """Convert a JSON number (or numeric string) to float, `default` when not numeric."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def to_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
