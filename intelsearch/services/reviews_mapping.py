"""Mappers from loosely-shaped review payloads to typed models.

The history endpoint logs whatever the caller sent, so the logged
request may be wrapped one or more times (``payload``, ``params``,
``body``, ``request_payload``, ``requestBody``), sometimes as a JSON
string.  The mappers unwrap those layers, accept snake_case and camelCase
keys, and fill every missing field with a neutral default.
"""

from __future__ import annotations

import json
import secrets
import time
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from intelsearch.models.filters import SavedSearchContext
from intelsearch.models.reviews import HybridSearchSchema, SavedSearchRecord, SearchHistoryEvent
from intelsearch.utils.payloads import (
    as_object,
    merge_unique_strings,
    to_non_empty_string,
    to_string_array,
)
from intelsearch.utils.time_ranges import to_iso

NESTED_REQUEST_KEYS = ("payload", "params", "body", "request_payload", "requestBody")
MAX_UNWRAP_DEPTH = 5

__all__ = [
    "map_entity_examples",
    "map_history_event",
    "map_hybrid_search_schema",
    "map_saved_search",
    "merge_schema_with_defaults",
    "to_string_array",
    "unwrap_search_params",
]


def _as_record(value: Any) -> dict[str, Any] | None:
    """Return a dict, parsing JSON-object strings; ``None`` otherwise."""
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return None
        return parsed if isinstance(parsed, dict) else None
    return None


def _fallback_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(1000)}"


def _now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _pick_first_string(
    records: Iterable[dict[str, Any] | None],
    keys: Iterable[str],
) -> str | None:
    keys = tuple(keys)
    for record in records:
        if not record:
            continue
        for key in keys:
            value = to_non_empty_string(record.get(key))
            if value:
                return value
    return None


def unwrap_search_params(candidate: dict[str, Any]) -> dict[str, Any]:
    """Descend through nested request wrappers, at most five levels deep."""
    current = candidate
    for _ in range(MAX_UNWRAP_DEPTH):
        nested = None
        for key in NESTED_REQUEST_KEYS:
            nested = _as_record(current.get(key))
            if nested is not None:
                break
        if nested is None:
            break
        current = nested
    return current


def _extract_saved_search(
    root: dict[str, Any],
    request: dict[str, Any],
) -> SavedSearchContext | None:
    sources = (root, request)
    search_id = _pick_first_string(sources, ("saved_search_id", "savedSearchId", "search_id"))
    name = _pick_first_string(sources, ("saved_search_name", "savedSearchName"))
    owner = _pick_first_string(sources, ("saved_search_owner", "savedSearchOwner", "owner"))
    tags = merge_unique_strings(
        *(record.get("saved_search_tags") for record in sources),
        *(record.get("savedSearchTags") for record in sources),
    )
    if search_id or name or owner or tags:
        return SavedSearchContext(id=search_id, name=name, owner=owner, tags=tuple(tags))
    return None


def map_history_event(payload: dict[str, Any]) -> SearchHistoryEvent:
    """Map one raw history log entry into a :class:`SearchHistoryEvent`."""
    raw = as_object(payload.get("payload"))
    nested = _as_record(raw.get("request"))
    request = unwrap_search_params(nested if nested is not None else raw)

    taxonomy = merge_unique_strings(
        request.get("classification"),
        request.get("taxonomy"),
        request.get("classifications"),
    )
    actor = payload.get("actor")
    created_at = payload.get("created_at")
    action_id = payload.get("action_id")
    case_id = raw.get("case_id")

    return SearchHistoryEvent(
        id=action_id if isinstance(action_id, str) and action_id else _fallback_id("history"),
        actor=actor if isinstance(actor, str) and actor else "analyst",
        created_at=created_at if isinstance(created_at, str) else _now_iso(),
        params=request,
        query=to_non_empty_string(request.get("query")) or to_non_empty_string(request.get("text")),
        classification=taxonomy[0] if taxonomy else None,
        case_id=case_id if isinstance(case_id, str) else None,
        result_count=_int_or_none(raw.get("results_count")),
        total=_int_or_none(raw.get("total")),
        saved_search=_extract_saved_search(raw, request),
    )


def map_saved_search(payload: dict[str, Any]) -> SavedSearchRecord:
    """Map one raw saved-search item into a :class:`SavedSearchRecord`."""
    search_id = payload.get("search_id", payload.get("searchId", payload.get("id")))
    name = payload.get("name")
    owner = payload.get("owner")
    created_at = payload.get("created_at", payload.get("createdAt"))

    return SavedSearchRecord(
        id=search_id if isinstance(search_id, str) and search_id else _fallback_id("saved"),
        name=name if isinstance(name, str) and name else "Saved search",
        owner=owner if isinstance(owner, str) else None,
        favorite=bool(payload.get("favorite")),
        tags=to_string_array(payload.get("tags")),
        created_at=created_at if isinstance(created_at, str) else _now_iso(),
        params=as_object(payload.get("params")),
    )


def map_entity_examples(value: Any) -> dict[str, list[str]]:
    examples: dict[str, list[str]] = {}
    for key, entry in as_object(value).items():
        values = to_string_array(entry)
        if isinstance(key, str) and values:
            examples[key] = values
    return examples


def map_hybrid_search_schema(value: dict[str, Any]) -> HybridSearchSchema:
    """Map a raw schema payload; missing lists come back empty."""

    def pick(snake: str, camel: str) -> Any:
        return value[snake] if value.get(snake) is not None else value.get(camel)

    return HybridSearchSchema(
        indicator_types=to_string_array(pick("indicator_types", "indicatorTypes")),
        datasets=to_string_array(value.get("datasets")),
        classifications=to_string_array(value.get("classifications")),
        loss_buckets=to_string_array(pick("loss_buckets", "lossBuckets")),
        time_presets=to_string_array(pick("time_presets", "timePresets")),
        entity_examples=map_entity_examples(pick("entity_examples", "entityExamples")),
    )


def merge_schema_with_defaults(
    live: HybridSearchSchema,
    defaults: HybridSearchSchema,
) -> HybridSearchSchema:
    """Fill every empty field of *live* from *defaults*."""
    return HybridSearchSchema(
        indicator_types=live.indicator_types or defaults.indicator_types,
        datasets=live.datasets or defaults.datasets,
        classifications=live.classifications or defaults.classifications,
        loss_buckets=live.loss_buckets or defaults.loss_buckets,
        time_presets=live.time_presets or defaults.time_presets,
        entity_examples=live.entity_examples or defaults.entity_examples,
    )
