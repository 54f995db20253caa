"""Query builder: filter state -> search request -> backend wire payload.

Two pure steps:

1. :func:`build_search_request` resolves a :class:`FilterState` plus
   optional per-call overrides into a :class:`SearchRequest` -- trimming the
   query, compacting entity rows, expanding the time preset, and echoing
   the saved-search identity only when it is attached (or explicitly
   requested).
2. :func:`build_backend_payload` flattens a :class:`SearchRequest` into the
   body the hybrid-search endpoint expects.  Optional arrays that would be
   empty are omitted entirely, and an explicit time range whose bounds do
   not parse is dropped rather than raised.

Neither step performs I/O or reads the clock except through the injected
preset resolver.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypedDict

from intelsearch.models.filters import EntityFilterRow, FilterState
from intelsearch.models.search import EntityFilter, SearchRequest, TimeRange
from intelsearch.utils.time_ranges import derive_time_range_from_preset, to_iso_or_none

PresetResolver = Callable[[str | None], TimeRange | None]


class SearchOverrides(TypedDict, total=False):
    """Per-call replacements for individual filter dimensions.

    A key that is present wins over the state, even when its value is empty
    (``{"entities": []}`` clears entity filtering for this call).
    """

    query: str
    sources: Iterable[str]
    taxonomy: Iterable[str]
    indicator_types: Iterable[str]
    datasets: Iterable[str]
    time_preset: str | None
    entities: Iterable[EntityFilterRow]


def compact_entity_filters(rows: Iterable[EntityFilterRow]) -> list[EntityFilter]:
    """Drop rows whose trimmed type or value is blank; trim the rest.

    Match modes are carried through unchanged and row order is preserved.
    """
    compacted: list[EntityFilter] = []
    for row in rows:
        entity_type = row.type.strip()
        value = row.value.strip()
        if not entity_type or not value:
            continue
        compacted.append(EntityFilter(type=entity_type, value=value, match_mode=row.match_mode))
    return compacted


def build_search_request(
    state: FilterState,
    overrides: SearchOverrides | None = None,
    *,
    include_saved_search: bool | None = None,
    preset_resolver: PresetResolver = derive_time_range_from_preset,
    page: int = 1,
    page_size: int | None = None,
) -> SearchRequest:
    """Resolve *state* (plus *overrides*) into a :class:`SearchRequest`.

    Parameters
    ----------
    state:
        The console's current filter state.
    overrides:
        Dimensions to replace for this call only.
    include_saved_search:
        ``True`` / ``False`` force the saved-search echo on or off; ``None``
        follows the state's attachment flag.
    preset_resolver:
        Expands a named time preset into an absolute range.
    page:
        Page to request.  Filter changes always start again at page 1.
    page_size:
        Results per page; defaults to the state's page size.
    """
    overrides = overrides or {}

    query = overrides.get("query", state.query)
    trimmed_query = query.strip() if isinstance(query, str) else ""
    sources = sorted(set(overrides.get("sources", state.sources)))
    taxonomy = sorted(set(overrides.get("taxonomy", state.taxonomy)))
    indicator_types = sorted(set(overrides.get("indicator_types", state.indicator_types)))
    datasets = sorted(set(overrides.get("datasets", state.datasets)))
    time_preset = overrides["time_preset"] if "time_preset" in overrides else state.time_preset
    entities = compact_entity_filters(overrides.get("entities", state.entities))
    time_range = preset_resolver(time_preset) if time_preset else None

    fields: dict[str, Any] = {
        "query": trimmed_query,
        "page": page,
        "page_size": page_size or state.page_size,
    }
    if sources:
        fields["sources"] = sources
    if taxonomy:
        fields["taxonomy"] = taxonomy
        fields["classifications"] = taxonomy
    if indicator_types:
        fields["indicator_types"] = indicator_types
    if datasets:
        fields["datasets"] = datasets
    if time_preset:
        fields["time_preset"] = time_preset
    if time_range is not None:
        fields["time_range"] = time_range
    if entities:
        fields["entities"] = entities

    attach = state.is_attached if include_saved_search is None else include_saved_search
    saved = state.saved_search
    if attach and saved is not None:
        if saved.id:
            fields["saved_search_id"] = saved.id
        if saved.name:
            fields["saved_search_name"] = saved.name
        if saved.owner:
            fields["saved_search_owner"] = saved.owner
        if saved.tags:
            fields["saved_search_tags"] = list(saved.tags)

    return SearchRequest(**fields)


def load_more(request: SearchRequest) -> SearchRequest:
    """Return the same search advanced by one page."""
    return request.model_copy(update={"page": request.page + 1})


def request_has_filters(request: SearchRequest) -> bool:
    """Return ``True`` when the request narrows the search in any way."""
    return bool(
        request.query.strip()
        or request.sources
        or request.taxonomy
        or request.indicator_types
        or request.datasets
        or request.time_preset
        or request.time_range
        or request.entities
    )


def _resolve_time_range(request: SearchRequest) -> dict[str, str] | None:
    if request.time_range is not None:
        start = to_iso_or_none(request.time_range.start)
        end = to_iso_or_none(request.time_range.end)
    elif request.from_date and request.to_date:
        start = to_iso_or_none(request.from_date)
        end = to_iso_or_none(request.to_date)
    else:
        return None

    if start and end:
        return {"start": start, "end": end}
    return None


def build_backend_payload(request: SearchRequest) -> dict[str, Any]:
    """Flatten *request* into the hybrid-search endpoint's body.

    ``text`` is always present (``""`` matches everything); every other
    optional field is omitted when it would be empty.
    """
    limit = request.page_size
    offset = max(request.page - 1, 0) * limit

    classifications = (
        request.classifications if request.classifications is not None else request.taxonomy
    ) or []
    datasets = (request.datasets if request.datasets is not None else request.sources) or []
    entities = [
        {"type": entity.type, "value": entity.value, "match_mode": entity.match_mode.value}
        for entity in request.entities or []
    ]

    body: dict[str, Any] = {
        "text": request.query.strip(),
        "limit": limit,
        "vector_limit": limit,
        "structured_limit": limit,
        "offset": offset,
    }
    if classifications:
        body["classifications"] = list(classifications)
    if datasets:
        body["datasets"] = list(datasets)
    if entities:
        body["entities"] = entities

    time_range = _resolve_time_range(request)
    if time_range is not None:
        body["time_range"] = time_range

    if request.saved_search_id:
        body["saved_search_id"] = request.saved_search_id
    if request.saved_search_name:
        body["saved_search_name"] = request.saved_search_name
    if request.saved_search_owner:
        body["saved_search_owner"] = request.saved_search_owner
    if request.saved_search_tags:
        body["saved_search_tags"] = list(request.saved_search_tags)

    return body
