"""Models for the review endpoints that sit next to search.

Saved searches, the search history log, and the hybrid-search schema are
persisted by the backend; this package only reads and writes them through
opaque endpoints and maps the loosely-shaped payloads into these models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from intelsearch.models.filters import SavedSearchContext


class _ReviewModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SavedSearchRecord(_ReviewModel):
    """A persisted search definition."""

    id: str
    name: str = "Saved search"
    owner: str | None = None
    favorite: bool = False
    tags: list[str] = Field(default_factory=list)
    created_at: str
    params: dict[str, Any] = Field(default_factory=dict)

    def to_context(self) -> SavedSearchContext:
        return SavedSearchContext(
            id=self.id,
            name=self.name,
            owner=self.owner,
            tags=tuple(self.tags),
        )


class SearchHistoryEvent(_ReviewModel):
    """One logged search action."""

    id: str
    actor: str = "analyst"
    created_at: str
    params: dict[str, Any] = Field(default_factory=dict)
    query: str | None = None
    classification: str | None = None
    case_id: str | None = None
    result_count: int | None = None
    total: int | None = None
    saved_search: SavedSearchContext | None = None


class HybridSearchSchema(_ReviewModel):
    """Filter vocabulary the backend supports (drives the sidebar options)."""

    indicator_types: list[str] = Field(default_factory=list)
    datasets: list[str] = Field(default_factory=list)
    classifications: list[str] = Field(default_factory=list)
    loss_buckets: list[str] = Field(default_factory=list)
    time_presets: list[str] = Field(default_factory=list)
    entity_examples: dict[str, list[str]] = Field(default_factory=dict)


class SaveSearchRequest(_ReviewModel):
    """Payload for persisting the current search."""

    name: str = Field(min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)
    favorite: bool | None = None
    tags: list[str] | None = None
    search_id: str | None = None
