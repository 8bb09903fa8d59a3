# price_scout/scrapers/json_path.py

"""Absence-tolerant access into nested JSON payloads."""

import math
from typing import Any


def dig(data: Any, *path: str | int) -> Any | None:
    """Follow *path* through nested dicts/lists.

    String steps index dicts, integer steps index lists. Any missing
    key, out-of-range index or unexpected type yields ``None`` instead
    of raising.

    >>> dig({"a": [{"b": 1}]}, "a", 0, "b")
    1
    >>> dig({"a": []}, "a", 0, "b") is None
    True
    """
    current: Any = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list):
                return None
            if not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return None
            current = current[step]
    return current


def as_float(value: Any) -> float | None:
    """Coerce a JSON scalar to a finite float, or ``None``."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
