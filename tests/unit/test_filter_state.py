"""Unit tests for the immutable FilterState and its saved-search flag."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from intelsearch.models.filters import (
    FilterState,
    SavedSearchAttachment,
    SavedSearchContext,
)
from intelsearch.models.search import MatchMode

_CONTEXT = SavedSearchContext(id="saved-1", name="Romance", owner="analyst_1")


class TestFilterStateEdits:
    def test_state_is_frozen(self) -> None:
        state = FilterState(query="x")
        with pytest.raises(ValidationError):
            state.query = "y"  # type: ignore[misc]

    def test_edits_return_new_instances(self) -> None:
        state = FilterState()
        edited = state.with_query("romance")

        assert edited is not state
        assert state.query == ""
        assert edited.query == "romance"

    def test_toggle_facet_adds_then_removes(self) -> None:
        state = FilterState().toggle_facet("sources", "intake")
        assert state.sources == frozenset({"intake"})

        state = state.toggle_facet("sources", "intake")
        assert state.sources == frozenset()

    def test_toggle_unknown_facet_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown facet field"):
            FilterState().toggle_facet("colour", "red")  # type: ignore[arg-type]

    def test_toggle_time_preset(self) -> None:
        state = FilterState().toggle_time_preset("7d")
        assert state.time_preset == "7d"
        assert state.toggle_time_preset("24h").time_preset == "24h"
        assert state.toggle_time_preset("7d").time_preset is None

    def test_entity_rows(self) -> None:
        state = FilterState().add_entity_filter("email", "a@b.c", MatchMode.PREFIX)
        row = state.entities[0]
        assert row.match_mode is MatchMode.PREFIX

        state = state.update_entity_filter(row.id, value="x@y.z")
        assert state.entities[0].value == "x@y.z"
        assert state.entities[0].id == row.id

        state = state.remove_entity_filter(row.id)
        assert state.entities == ()

    def test_entity_row_ids_are_unique(self) -> None:
        state = FilterState().add_entity_filter("email").add_entity_filter("email")
        assert state.entities[0].id != state.entities[1].id

    def test_reset_entity_filters(self) -> None:
        state = FilterState().add_entity_filter("email", "a").add_entity_filter("phone", "1")
        assert state.reset_entity_filters().entities == ()

    def test_clear_filters_keeps_query(self) -> None:
        state = (
            FilterState(query="keep")
            .toggle_facet("taxonomy", "ponzi")
            .toggle_facet("datasets", "intake")
            .toggle_time_preset("7d")
            .add_entity_filter("email", "a")
        )
        cleared = state.clear_filters()

        assert cleared.query == "keep"
        assert cleared.taxonomy == frozenset()
        assert cleared.datasets == frozenset()
        assert cleared.time_preset is None
        assert cleared.entities == ()


# ======================================================================
# Saved-search attachment
# ======================================================================


class TestSavedSearchAttachment:
    def test_default_is_detached(self) -> None:
        state = FilterState()
        assert state.attachment is SavedSearchAttachment.DETACHED
        assert state.is_attached is False

    def test_attach(self) -> None:
        state = FilterState().attach_saved_search(_CONTEXT)
        assert state.is_attached is True
        assert state.saved_search == _CONTEXT

    @pytest.mark.parametrize(
        "edit",
        [
            lambda s: s.with_query("x"),
            lambda s: s.toggle_facet("sources", "intake"),
            lambda s: s.toggle_time_preset("7d"),
            lambda s: s.add_entity_filter("email", "a"),
            lambda s: s.clear_filters(),
        ],
    )
    def test_any_edit_detaches_but_keeps_context(self, edit) -> None:
        state = edit(FilterState().attach_saved_search(_CONTEXT))

        assert state.is_attached is False
        assert state.saved_search == _CONTEXT

    def test_reattach_uses_existing_context(self) -> None:
        state = FilterState().attach_saved_search(_CONTEXT).with_query("x")
        assert state.attach_saved_search().is_attached is True

    def test_attach_empty_context_stays_detached(self) -> None:
        state = FilterState().attach_saved_search(SavedSearchContext())
        assert state.is_attached is False
        assert state.saved_search is None


# ======================================================================
# from_params
# ======================================================================


class TestFromParams:
    def test_camel_case_params(self) -> None:
        state = FilterState.from_params(
            {
                "query": "romance",
                "sources": ["intake"],
                "taxonomy": ["romance_scam"],
                "indicatorTypes": ["email"],
                "timePreset": "7d",
                "entities": [{"type": "email", "value": "a@b.c", "matchMode": "contains"}],
            }
        )

        assert state.query == "romance"
        assert state.sources == frozenset({"intake"})
        assert state.taxonomy == frozenset({"romance_scam"})
        assert state.indicator_types == frozenset({"email"})
        assert state.time_preset == "7d"
        assert state.entities[0].match_mode == MatchMode.CONTAINS
        assert state.is_attached is False

    def test_snake_case_backend_params(self) -> None:
        state = FilterState.from_params(
            {"text": "wallet", "classifications": ["ponzi"], "time_preset": "24h"}
        )
        assert state.query == "wallet"
        assert state.taxonomy == frozenset({"ponzi"})
        assert state.time_preset == "24h"

    def test_bad_entities_are_tolerated(self) -> None:
        state = FilterState.from_params(
            {"entities": ["junk", {"value": 3, "matchMode": "fuzzy"}]}
        )
        assert len(state.entities) == 1
        row = state.entities[0]
        assert row.type == "bank_account"
        assert row.value == ""
        assert row.match_mode == MatchMode.EXACT

    def test_with_saved_search_is_attached(self) -> None:
        state = FilterState.from_params({"query": "romance"}, saved_search=_CONTEXT)
        assert state.is_attached is True
