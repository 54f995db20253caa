"""Coercion helpers for untyped JSON payloads.

Backend payloads have no enforced schema, so every extraction in the
normalizer and the review mappers goes through these small, total helpers
instead of indexing dicts directly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any


def as_object(value: Any) -> dict[str, Any]:
    """Return *value* when it is a dict, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def to_non_empty_string(value: Any) -> str | None:
    """Return the stripped string, or ``None`` for blanks and non-strings."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def non_empty_str(value: Any) -> str | None:
    """Return *value* unchanged when it is a non-empty string."""
    if isinstance(value, str) and value:
        return value
    return None


def to_string_array(value: Any) -> list[str]:
    """Coerce a list or comma-separated string into a list of strings.

    Non-string list members and empty strings are dropped.
    """
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str) and item]
    if isinstance(value, str) and value:
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


def merge_unique_strings(*sources: Any) -> list[str]:
    """Merge string arrays, de-duplicating case-insensitively, first wins."""
    seen: set[str] = set()
    merged: list[str] = []
    for source in sources:
        for entry in to_string_array(source):
            key = entry.lower()
            if key in seen:
                continue
            seen.add(key)
            merged.append(entry)
    return merged


def to_finite_number(value: Any) -> float | None:
    """Return *value* as a finite float, or ``None``.

    Accepts ints, floats and numeric strings.  Booleans and ``None`` are not
    numbers here, even though Python treats ``True`` as ``1``.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # JSON integers have no size limit; floats do.
            return None
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def first_number(candidates: Iterable[Any]) -> float | None:
    """Return the first finite number among *candidates*."""
    for candidate in candidates:
        number = to_finite_number(candidate)
        if number is not None:
            return number
    return None

