"""Date parsing and time-preset helpers.

All helpers are best-effort: an unparseable value yields ``None`` (or the
current time for :func:`normalise_iso_date`) instead of raising, because a
malformed date must never block a search or the rendering of a result.

Serialised timestamps use the ``YYYY-MM-DDTHH:MM:SS.mmmZ`` form so that
values round-trip unchanged through the backend and the browser.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from intelsearch.models.search import TimeRange

# "7d", "24h", "30m" -- amount followed by a unit, whitespace tolerated.
_TIME_PRESET_PATTERN = re.compile(r"^\s*(\d+)([dhm])\s*$", re.IGNORECASE)

_UNIT_DELTAS = {
    "d": lambda amount: timedelta(days=amount),
    "h": lambda amount: timedelta(hours=amount),
    "m": lambda amount: timedelta(minutes=amount),
}


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime.

    Naive values are assumed to be UTC.  Returns ``None`` for anything
    that cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # Offsets at the calendar edges shift the instant out of range.
        return None


def to_iso(value: datetime) -> str:
    """Serialise an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_iso_or_none(value: Any) -> str | None:
    """Re-serialise *value* to ISO-8601, or ``None`` when it is invalid."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return to_iso(parsed)


def normalise_iso_date(value: Any, now: datetime | None = None) -> str:
    """Return *value* as ISO-8601, substituting the current time when invalid."""
    parsed = parse_datetime(value)
    if parsed is None:
        parsed = now or datetime.now(timezone.utc)
    return to_iso(parsed)


def derive_time_range_from_preset(
    preset: str | None,
    now: datetime | None = None,
) -> TimeRange | None:
    """Expand a named preset such as ``"7d"`` into an absolute range ending now.

    Supported units are days (``d``), hours (``h``) and minutes (``m``).
    Unknown or non-positive presets resolve to ``None``.
    """
    if not preset:
        return None

    match = _TIME_PRESET_PATTERN.match(preset)
    if not match:
        return None

    try:
        amount = int(match.group(1))
    except ValueError:
        # Beyond the interpreter's integer string conversion limit.
        return None
    if amount <= 0:
        return None

    end = now or datetime.now(timezone.utc)
    try:
        start = end - _UNIT_DELTAS[match.group(2).lower()](amount)
    except OverflowError:
        return None
    return TimeRange(start=to_iso(start), end=to_iso(end))
