"""Normalize raw hybrid-search hits into result cards.

The backend fuses two retrieval paths and returns entries that may carry a
``record`` (structured store: case id, text, metadata, entities), a
``vector`` (semantic store: label, text, document, similarity/distance),
both, or neither.  No field is guaranteed to be present.

Each output field is resolved independently by an ordered list of lookups,
first defined value wins:

    id        record.case_id -> entry.case_id -> "result-{index}"
    title     record.metadata.title -> record.case_id -> first line of
              record.text -> first line of vector.text -> "Result"
    snippet   record.text -> vector.text -> vector.document (280 chars)
              -> classification placeholder -> "no excerpt" placeholder
    score     entry.score -> vector.similarity -> vector.score ->
              vector.distance, then mapped into [0, 1] (see fuse_score)
    source    entry.sources -> presence of vector -> presence of record
    tags      record.classification + record.metadata.tags +
              record.entities values + vector.label (max 8, de-duplicated)

:func:`normalize_result` is total: every lookup has a terminal fallback, so
a malformed entry produces a sparse card, never an exception.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from intelsearch.models.search import NormalizedResult
from intelsearch.utils.payloads import as_object, first_number, non_empty_str, to_finite_number
from intelsearch.utils.time_ranges import normalise_iso_date

TITLE_MAX_CHARS = 120
SNIPPET_MAX_CHARS = 280
MAX_TAGS = 8
DEFAULT_TITLE = "Result"
NO_EXCERPT_PLACEHOLDER = "No excerpt available (migrated data)."
CLASSIFICATION_PLACEHOLDER = "[Content unavailable] Classification: {classification}"


def _parts(entry: Any) -> tuple[dict[str, Any], dict[str, Any], dict[str, Any]]:
    """Return ``(entry, record, vector)`` with missing parts as empty dicts."""
    obj = as_object(entry)
    return obj, as_object(obj.get("record")), as_object(obj.get("vector"))


def _first_line(text: str) -> str:
    return text.split("\n", 1)[0][:TITLE_MAX_CHARS]


def resolve_id(entry: Any, index: int) -> str:
    obj, record, _ = _parts(entry)
    return (
        non_empty_str(record.get("case_id"))
        or non_empty_str(obj.get("case_id"))
        or f"result-{index}"
    )


def extract_title(entry: Any) -> str:
    _, record, vector = _parts(entry)
    metadata = as_object(record.get("metadata"))

    title = non_empty_str(metadata.get("title")) or non_empty_str(record.get("case_id"))
    if title:
        return title

    for text in (non_empty_str(record.get("text")), non_empty_str(vector.get("text"))):
        if text:
            # A text that starts with a newline has an empty first line.
            return _first_line(text) or DEFAULT_TITLE
    return DEFAULT_TITLE


def extract_snippet(entry: Any) -> str:
    obj, record, vector = _parts(entry)
    text = (
        non_empty_str(record.get("text"))
        or non_empty_str(vector.get("text"))
        or non_empty_str(vector.get("document"))
    )
    if text:
        return text[:SNIPPET_MAX_CHARS]

    # Records migrated from the older store can lack text entirely.
    classification = (
        non_empty_str(record.get("classification"))
        or non_empty_str(vector.get("classification"))
        or non_empty_str(as_object(obj.get("metadata")).get("classification"))
    )
    if classification:
        return CLASSIFICATION_PLACEHOLDER.format(classification=classification)[:SNIPPET_MAX_CHARS]
    return NO_EXCERPT_PLACEHOLDER


def fuse_score(entry: Any) -> float:
    """Map whichever score the entry carries into ``[0, 1]``, 2 decimals.

    - ``> 1``: a 0-100 percentage from the structured store; divided by 100
      and capped at 1.
    - ``< 0``: a distance from the vector store; mapped via ``1 / (1 + |d|)``.
    - otherwise: already a 0-1 similarity.

    These thresholds reconcile the two stores' conventions empirically; if
    either store changes its metric the mapping silently drifts.
    """
    obj, _, vector = _parts(entry)
    candidate = first_number(
        (
            obj.get("score"),
            vector.get("similarity"),
            vector.get("score"),
            vector.get("distance"),
        )
    )
    if candidate is None:
        candidate = 0.0

    if candidate > 1.0:
        score = min(candidate / 100.0, 1.0)
    elif candidate < 0:
        score = 1.0 / (1.0 + abs(candidate))
    else:
        score = candidate
    return round(score, 2)


def extract_source(entry: Any) -> str:
    obj, _, _ = _parts(entry)
    sources = obj.get("sources")

    if isinstance(sources, list) and sources:
        labels = [str(item) for item in sources if item is not None and str(item)]
        if "structured" in labels and "vector" in labels:
            return "hybrid"
        if labels:
            return labels[0]
    if isinstance(sources, str) and sources:
        return sources

    if isinstance(obj.get("vector"), dict):
        return "vector"
    if isinstance(obj.get("record"), dict):
        return "structured"
    return "unknown"


def extract_tags(entry: Any) -> list[str]:
    _, record, vector = _parts(entry)
    # dict keys keep discovery order and drop duplicates.
    tags: dict[str, None] = {}

    classification = non_empty_str(record.get("classification"))
    if classification:
        tags[classification] = None

    metadata_tags = as_object(record.get("metadata")).get("tags")
    if isinstance(metadata_tags, list):
        for tag in metadata_tags:
            if non_empty_str(tag):
                tags[tag] = None

    for values in as_object(record.get("entities")).values():
        if isinstance(values, list):
            for value in values:
                if non_empty_str(value):
                    tags[value] = None

    label = non_empty_str(vector.get("label"))
    if label:
        tags[label] = None

    return list(tags)[:MAX_TAGS]


def extract_confidence(entry: Any) -> float | None:
    _, record, _ = _parts(entry)
    value = record.get("confidence")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return to_finite_number(value)
    return None


def normalize_result(entry: Any, index: int, now: datetime | None = None) -> NormalizedResult:
    """Normalize one raw backend entry at position *index* into a result card."""
    _, record, _ = _parts(entry)
    return NormalizedResult(
        id=resolve_id(entry, index),
        title=extract_title(entry),
        snippet=extract_snippet(entry),
        source=extract_source(entry),
        tags=extract_tags(entry),
        score=fuse_score(entry),
        occurred_at=normalise_iso_date(record.get("created_at"), now=now),
        confidence=extract_confidence(entry),
    )


def normalize_results(entries: Any, now: datetime | None = None) -> list[NormalizedResult]:
    """Normalize every entry of a ``results`` array; non-lists yield ``[]``."""
    if not isinstance(entries, list):
        return []
    return [normalize_result(entry, index, now=now) for index, entry in enumerate(entries)]
