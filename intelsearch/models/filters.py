"""Filter state model for the analyst search console.

The :class:`FilterState` is the user's current query intent: free text,
facet selections, a time preset, typed entity filters, and an optional
saved-search context.  It is an immutable value object -- every edit
returns a new instance, so the query builder can stay a pure function of
the state it is handed.

Saved-search attachment is an explicit two-state flag rather than
something inferred from call sites:

    ATTACHED  -- the next request echoes the saved-search identity so the
                 backend associates the run with the persisted query.
    DETACHED  -- the results no longer correspond to the saved search.

Editing anything (query, facets, preset, entity rows) detaches; re-running
a saved search (:meth:`FilterState.attach_saved_search`) re-attaches.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from intelsearch.models.search import DEFAULT_PAGE_SIZE, MatchMode
from intelsearch.utils.payloads import to_non_empty_string, to_string_array

FacetField = Literal["sources", "taxonomy", "indicator_types", "datasets"]

FACET_FIELDS: tuple[str, ...] = ("sources", "taxonomy", "indicator_types", "datasets")


def generate_entity_filter_id() -> str:
    """Return a fresh identifier for an entity filter row."""
    return uuid.uuid4().hex


class SavedSearchAttachment(str, Enum):
    ATTACHED = "attached"
    DETACHED = "detached"


class SavedSearchContext(BaseModel):
    """Identity and metadata of a persisted search definition."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str | None = None
    owner: str | None = None
    tags: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (self.id or self.name or self.owner or self.tags)


class EntityFilterRow(BaseModel):
    """An editable entity filter row.

    Rows may hold a blank value while the analyst is still typing; the
    query builder drops those rows when it compacts the filter list.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_entity_filter_id)
    type: str
    value: str = ""
    match_mode: MatchMode = MatchMode.EXACT


class FilterState(BaseModel):
    """Immutable snapshot of the console's search filters."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    sources: frozenset[str] = frozenset()
    taxonomy: frozenset[str] = frozenset()
    indicator_types: frozenset[str] = frozenset()
    datasets: frozenset[str] = frozenset()
    time_preset: str | None = None
    entities: tuple[EntityFilterRow, ...] = ()
    saved_search: SavedSearchContext | None = None
    attachment: SavedSearchAttachment = SavedSearchAttachment.DETACHED
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)

    # ------------------------------------------------------------------
    # Saved-search state machine
    # ------------------------------------------------------------------

    @property
    def is_attached(self) -> bool:
        return (
            self.attachment is SavedSearchAttachment.ATTACHED
            and self.saved_search is not None
            and not self.saved_search.is_empty()
        )

    def attach_saved_search(self, context: SavedSearchContext | None = None) -> FilterState:
        """Re-attach (or attach a new) saved-search context."""
        target = context if context is not None else self.saved_search
        if target is None or target.is_empty():
            return self.model_copy(
                update={"saved_search": None, "attachment": SavedSearchAttachment.DETACHED}
            )
        return self.model_copy(
            update={"saved_search": target, "attachment": SavedSearchAttachment.ATTACHED}
        )

    def detach_saved_search(self) -> FilterState:
        return self.model_copy(update={"attachment": SavedSearchAttachment.DETACHED})

    def _edited(self, **update: Any) -> FilterState:
        update["attachment"] = SavedSearchAttachment.DETACHED
        return self.model_copy(update=update)

    # ------------------------------------------------------------------
    # Edits (all detach the saved search)
    # ------------------------------------------------------------------

    def with_query(self, query: str) -> FilterState:
        return self._edited(query=query)

    def toggle_facet(self, field: FacetField, value: str) -> FilterState:
        """Add *value* to the facet set when absent, remove it when present."""
        if field not in FACET_FIELDS:
            raise ValueError(f"Unknown facet field: {field}")
        current: frozenset[str] = getattr(self, field)
        return self._edited(**{field: current ^ {value}})

    def toggle_time_preset(self, preset: str) -> FilterState:
        """Select *preset*, or clear it when it is already the active one."""
        next_preset = None if self.time_preset == preset else preset
        return self._edited(time_preset=next_preset)

    def add_entity_filter(
        self,
        entity_type: str,
        value: str = "",
        match_mode: MatchMode = MatchMode.EXACT,
    ) -> FilterState:
        row = EntityFilterRow(type=entity_type, value=value, match_mode=match_mode)
        return self._edited(entities=(*self.entities, row))

    def update_entity_filter(self, row_id: str, **patch: Any) -> FilterState:
        rows = tuple(
            row.model_copy(update=patch) if row.id == row_id else row
            for row in self.entities
        )
        return self._edited(entities=rows)

    def remove_entity_filter(self, row_id: str) -> FilterState:
        return self._edited(entities=tuple(row for row in self.entities if row.id != row_id))

    def reset_entity_filters(self) -> FilterState:
        return self._edited(entities=())

    def clear_filters(self) -> FilterState:
        return self._edited(
            sources=frozenset(),
            taxonomy=frozenset(),
            indicator_types=frozenset(),
            datasets=frozenset(),
            time_preset=None,
            entities=(),
        )

    # ------------------------------------------------------------------
    # Construction from persisted parameters
    # ------------------------------------------------------------------

    @classmethod
    def from_params(
        cls,
        params: dict[str, Any],
        saved_search: SavedSearchContext | None = None,
        default_entity_type: str = "bank_account",
    ) -> FilterState:
        """Rebuild a state from stored request params (saved search, history).

        Accepts both the console's camelCase keys and the backend's
        snake_case keys.  The result is attached when *saved_search* is given.
        """
        def pick(*keys: str) -> Any:
            for key in keys:
                if key in params and params[key] is not None:
                    return params[key]
            return None

        query = to_non_empty_string(pick("query", "text")) or ""
        rows: list[EntityFilterRow] = []
        raw_entities = pick("entities")
        for entry in raw_entities if isinstance(raw_entities, list) else []:
            if not isinstance(entry, dict):
                continue
            mode = entry.get("matchMode", entry.get("match_mode"))
            rows.append(
                EntityFilterRow(
                    type=to_non_empty_string(entry.get("type")) or default_entity_type,
                    value=entry.get("value") if isinstance(entry.get("value"), str) else "",
                    match_mode=mode if mode in {m.value for m in MatchMode} else MatchMode.EXACT,
                )
            )

        state = cls(
            query=query,
            sources=frozenset(to_string_array(pick("sources"))),
            taxonomy=frozenset(to_string_array(pick("taxonomy", "classifications", "classification"))),
            indicator_types=frozenset(to_string_array(pick("indicatorTypes", "indicator_types"))),
            datasets=frozenset(to_string_array(pick("datasets"))),
            time_preset=to_non_empty_string(pick("timePreset", "time_preset")),
            entities=tuple(rows),
        )
        if saved_search is not None:
            return state.attach_saved_search(saved_search)
        return state
