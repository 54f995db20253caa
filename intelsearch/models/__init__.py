"""intelsearch domain models -- re-exports all public model classes.

The models are organized across three submodules by concern:
    - filters.py  -- Console filter state and the saved-search state machine
    - search.py   -- Search request, normalized results, facets, response
    - reviews.py  -- Saved searches, search history, hybrid-search schema
"""

from __future__ import annotations

from intelsearch.models.filters import (
    FACET_FIELDS,
    EntityFilterRow,
    FacetField,
    FilterState,
    SavedSearchAttachment,
    SavedSearchContext,
    generate_entity_filter_id,
)
from intelsearch.models.reviews import (
    HybridSearchSchema,
    SavedSearchRecord,
    SaveSearchRequest,
    SearchHistoryEvent,
)
from intelsearch.models.search import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    EntityFilter,
    Facet,
    FacetOption,
    MatchMode,
    NormalizedResult,
    SearchRequest,
    SearchResponse,
    SearchStats,
    TimeRange,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "FACET_FIELDS",
    "MAX_PAGE_SIZE",
    "EntityFilter",
    "EntityFilterRow",
    "Facet",
    "FacetField",
    "FacetOption",
    "FilterState",
    "HybridSearchSchema",
    "MatchMode",
    "NormalizedResult",
    "SaveSearchRequest",
    "SavedSearchAttachment",
    "SavedSearchContext",
    "SavedSearchRecord",
    "SearchHistoryEvent",
    "SearchRequest",
    "SearchResponse",
    "SearchStats",
    "TimeRange",
    "generate_entity_filter_id",
]
