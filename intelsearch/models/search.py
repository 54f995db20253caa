"""Search request and response models.

Defines Pydantic v2 models for the caller-facing search contract: the
request a console issues, the normalized result cards, the facets derived
from a result page, and the combined response.  All models are frozen --
every search call produces a fresh, fully independent response object and
nothing is mutated in place afterwards.

Field names are snake_case in Python and camelCase on the wire
(``page_size`` <-> ``pageSize``, ``occurred_at`` <-> ``occurredAt``) via the
shared alias generator; both spellings are accepted on input.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class MatchMode(str, Enum):
    """How an entity filter value is compared against indexed values."""

    EXACT = "exact"
    PREFIX = "prefix"
    CONTAINS = "contains"


class _WireModel(BaseModel):
    """Base for models exchanged with the console (camelCase aliases)."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------
class TimeRange(_WireModel):
    """An absolute time window.  Bounds are kept as strings until the
    query builder parses them, so an invalid bound degrades to "no range"
    instead of rejecting the whole request."""

    start: str
    end: str


class EntityFilter(_WireModel):
    """A typed entity filter as sent in a search request."""

    type: str = Field(min_length=1)
    value: str = Field(min_length=1)
    match_mode: MatchMode = MatchMode.EXACT


class SearchRequest(_WireModel):
    """A fully-resolved search request.

    Produced by :func:`intelsearch.services.query_builder.build_search_request`
    from the console's filter state, or posted directly to ``/api/v1/search``.
    Optional list fields are ``None`` when the dimension is unfiltered.
    """

    query: str = ""
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sources: list[str] | None = None
    taxonomy: list[str] | None = None
    classifications: list[str] | None = None
    datasets: list[str] | None = None
    indicator_types: list[str] | None = None
    loss_buckets: list[str] | None = None
    from_date: str | None = None
    to_date: str | None = None
    time_preset: str | None = None
    time_range: TimeRange | None = None
    entities: list[EntityFilter] | None = None
    saved_search_id: str | None = None
    saved_search_name: str | None = None
    saved_search_owner: str | None = None
    saved_search_tags: list[str] | None = None


# ---------------------------------------------------------------------------
# Response side
# ---------------------------------------------------------------------------
class NormalizedResult(_WireModel):
    """One result card, normalized from a structured and/or vector hit.

    ``title`` and ``snippet`` are never empty and ``score`` is always a
    2-decimal value in ``[0, 1]``.  ``confidence`` is ``None`` when the
    backend did not report one -- absence is not the same as zero.
    """

    id: str
    title: str = Field(min_length=1)
    snippet: str = Field(min_length=1, max_length=280)
    source: str
    tags: list[str] = Field(default_factory=list, max_length=8)
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    occurred_at: str
    confidence: float | None = None


class FacetOption(_WireModel):
    value: str
    count: int = Field(ge=0)


class Facet(_WireModel):
    """A filter dimension with counts derived from the current result page."""

    field: str
    label: str
    options: list[FacetOption] = Field(default_factory=list)


class SearchStats(_WireModel):
    query: str
    total: int = Field(ge=0)
    took: int = Field(ge=0, description="Backend time in milliseconds.")
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)


class SearchResponse(_WireModel):
    """The combined answer to one search call."""

    results: list[NormalizedResult] = Field(default_factory=list)
    stats: SearchStats
    facets: list[Facet] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
