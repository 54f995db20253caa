"""Unit tests for intelsearch.services.query_builder."""

from __future__ import annotations

import pytest

from intelsearch.models.filters import EntityFilterRow, FilterState, SavedSearchContext
from intelsearch.models.search import MatchMode, SearchRequest, TimeRange
from intelsearch.services.query_builder import (
    build_backend_payload,
    build_search_request,
    compact_entity_filters,
    load_more,
    request_has_filters,
)

_RANGE = TimeRange(start="2025-11-13T12:00:00.000Z", end="2025-11-20T12:00:00.000Z")


def _fixed_resolver(preset: str | None) -> TimeRange | None:
    return _RANGE if preset == "7d" else None


# ======================================================================
# compact_entity_filters
# ======================================================================


class TestCompactEntityFilters:
    def test_drops_blank_rows_and_trims(self) -> None:
        rows = [
            EntityFilterRow(type="email", value="  a@b.com  "),
            EntityFilterRow(type="bank_account", value="   "),
            EntityFilterRow(type="  ", value="orphan"),
        ]
        compacted = compact_entity_filters(rows)

        assert len(compacted) == 1
        assert compacted[0].type == "email"
        assert compacted[0].value == "a@b.com"

    def test_preserves_order_and_match_mode(self) -> None:
        rows = [
            EntityFilterRow(type="phone", value="+44", match_mode=MatchMode.PREFIX),
            EntityFilterRow(type="email", value="bob", match_mode=MatchMode.CONTAINS),
        ]
        compacted = compact_entity_filters(rows)

        assert [entity.type for entity in compacted] == ["phone", "email"]
        assert [entity.match_mode for entity in compacted] == [
            MatchMode.PREFIX,
            MatchMode.CONTAINS,
        ]

    def test_all_blank_yields_empty(self) -> None:
        assert compact_entity_filters([EntityFilterRow(type="email")]) == []


# ======================================================================
# build_search_request
# ======================================================================


class TestBuildSearchRequest:
    def test_query_is_trimmed(self) -> None:
        request = build_search_request(FilterState(query="  wallet cluster  "))
        assert request.query == "wallet cluster"

    def test_empty_state_has_no_optional_fields(self) -> None:
        request = build_search_request(FilterState())

        assert request.query == ""
        assert request.page == 1
        assert request.page_size == 10
        assert request.sources is None
        assert request.taxonomy is None
        assert request.entities is None
        assert request.time_range is None
        assert request.saved_search_id is None

    def test_taxonomy_is_mirrored_into_classifications(self) -> None:
        state = FilterState(taxonomy=frozenset({"romance_scam"}))
        request = build_search_request(state)

        assert request.taxonomy == ["romance_scam"]
        assert request.classifications == ["romance_scam"]

    def test_facets_are_sorted(self) -> None:
        state = FilterState(sources=frozenset({"open-source", "customs", "intake"}))
        request = build_search_request(state)
        assert request.sources == ["customs", "intake", "open-source"]

    def test_time_preset_is_expanded(self) -> None:
        state = FilterState(time_preset="7d")
        request = build_search_request(state, preset_resolver=_fixed_resolver)

        assert request.time_preset == "7d"
        assert request.time_range == _RANGE

    def test_unknown_preset_has_no_range(self) -> None:
        state = FilterState(time_preset="fortnight")
        request = build_search_request(state, preset_resolver=_fixed_resolver)

        assert request.time_preset == "fortnight"
        assert request.time_range is None

    def test_preset_past_the_calendar_edge_has_no_range(self) -> None:
        request = build_search_request(FilterState(time_preset="999999d"))

        assert request.time_preset == "999999d"
        assert request.time_range is None
        assert "time_range" not in build_backend_payload(request)

    def test_blank_entity_rows_are_dropped(self) -> None:
        state = FilterState().add_entity_filter("email").add_entity_filter("email", "x@y.z")
        request = build_search_request(state)

        assert request.entities is not None
        assert [entity.value for entity in request.entities] == ["x@y.z"]

    def test_override_wins_over_state(self) -> None:
        state = FilterState(query="state", sources=frozenset({"intake"}))
        request = build_search_request(state, {"query": "override", "sources": []})

        assert request.query == "override"
        assert request.sources is None

    def test_override_can_clear_time_preset(self) -> None:
        state = FilterState(time_preset="7d")
        request = build_search_request(
            state, {"time_preset": None}, preset_resolver=_fixed_resolver
        )
        assert request.time_preset is None
        assert request.time_range is None

    def test_page_and_page_size(self) -> None:
        request = build_search_request(FilterState(page_size=25), page=3)
        assert request.page == 3
        assert request.page_size == 25

        request = build_search_request(FilterState(page_size=25), page_size=5)
        assert request.page_size == 5


class TestSavedSearchEcho:
    _context = SavedSearchContext(
        id="saved-1", name="Romance", owner="analyst_1", tags=("priority",)
    )

    def test_attached_state_echoes_identity(self) -> None:
        state = FilterState().attach_saved_search(self._context)
        request = build_search_request(state)

        assert request.saved_search_id == "saved-1"
        assert request.saved_search_name == "Romance"
        assert request.saved_search_owner == "analyst_1"
        assert request.saved_search_tags == ["priority"]

    def test_edit_detaches(self) -> None:
        state = FilterState().attach_saved_search(self._context).with_query("changed")
        request = build_search_request(state)

        assert request.saved_search_id is None
        assert request.saved_search_name is None

    def test_explicit_flag_overrides_attachment(self) -> None:
        detached = FilterState().attach_saved_search(self._context).detach_saved_search()
        assert build_search_request(detached, include_saved_search=True).saved_search_id == (
            "saved-1"
        )

        attached = FilterState().attach_saved_search(self._context)
        assert build_search_request(attached, include_saved_search=False).saved_search_id is None

    def test_flag_without_context_is_ignored(self) -> None:
        request = build_search_request(FilterState(), include_saved_search=True)
        assert request.saved_search_id is None


# ======================================================================
# load_more / request_has_filters
# ======================================================================


class TestLoadMore:
    def test_advances_one_page_and_keeps_filters(self) -> None:
        request = SearchRequest(query="romance", page=2, sources=["intake"])
        next_request = load_more(request)

        assert next_request.page == 3
        assert next_request.query == "romance"
        assert next_request.sources == ["intake"]
        assert request.page == 2


class TestRequestHasFilters:
    def test_empty_request(self) -> None:
        assert request_has_filters(SearchRequest()) is False

    def test_whitespace_query_is_not_a_filter(self) -> None:
        assert request_has_filters(SearchRequest(query="   ")) is False

    @pytest.mark.parametrize(
        "fields",
        [
            {"query": "x"},
            {"sources": ["intake"]},
            {"taxonomy": ["ponzi"]},
            {"time_preset": "7d"},
            {"entities": [{"type": "email", "value": "a@b.c"}]},
        ],
    )
    def test_any_dimension_counts(self, fields: dict) -> None:
        assert request_has_filters(SearchRequest(**fields)) is True


# ======================================================================
# build_backend_payload
# ======================================================================


class TestBuildBackendPayload:
    def test_minimal_payload(self) -> None:
        body = build_backend_payload(SearchRequest())

        assert body == {
            "text": "",
            "limit": 10,
            "vector_limit": 10,
            "structured_limit": 10,
            "offset": 0,
        }

    def test_offset_from_page(self) -> None:
        body = build_backend_payload(SearchRequest(page=3, page_size=20))

        assert body["offset"] == 40
        assert body["limit"] == 20
        assert body["vector_limit"] == 20
        assert body["structured_limit"] == 20

    def test_classifications_fall_back_to_taxonomy(self) -> None:
        body = build_backend_payload(SearchRequest(taxonomy=["ponzi"]))
        assert body["classifications"] == ["ponzi"]

    def test_explicit_classifications_win(self) -> None:
        body = build_backend_payload(
            SearchRequest(taxonomy=["ponzi"], classifications=["romance_scam"])
        )
        assert body["classifications"] == ["romance_scam"]

    def test_datasets_fall_back_to_sources(self) -> None:
        body = build_backend_payload(SearchRequest(sources=["intake"]))
        assert body["datasets"] == ["intake"]

    def test_empty_arrays_are_omitted(self) -> None:
        body = build_backend_payload(
            SearchRequest(sources=[], taxonomy=[], entities=[], saved_search_tags=[])
        )
        for key in ("classifications", "datasets", "entities", "saved_search_tags"):
            assert key not in body

    def test_entities_use_snake_case_match_mode(self) -> None:
        request = SearchRequest(
            entities=[{"type": "email", "value": "bob", "matchMode": "prefix"}]
        )
        body = build_backend_payload(request)
        assert body["entities"] == [{"type": "email", "value": "bob", "match_mode": "prefix"}]

    def test_time_range_is_normalized(self) -> None:
        request = SearchRequest(
            time_range=TimeRange(start="2025-11-13T12:00:00Z", end="2025-11-20T12:00:00+00:00")
        )
        body = build_backend_payload(request)
        assert body["time_range"] == {
            "start": "2025-11-13T12:00:00.000Z",
            "end": "2025-11-20T12:00:00.000Z",
        }

    def test_invalid_time_range_is_dropped(self) -> None:
        request = SearchRequest(time_range=TimeRange(start="not a date", end="2025-11-20"))
        assert "time_range" not in build_backend_payload(request)

    @pytest.mark.parametrize(
        ("start", "end"),
        [
            ("0001-01-01T00:00:00+05:00", "2025-11-20T12:00:00Z"),
            ("2025-11-13T12:00:00Z", "9999-12-31T23:00:00-05:00"),
        ],
    )
    def test_out_of_range_time_bound_is_dropped(self, start: str, end: str) -> None:
        request = SearchRequest(time_range=TimeRange(start=start, end=end))
        assert "time_range" not in build_backend_payload(request)

    def test_from_and_to_dates_build_a_range(self) -> None:
        request = SearchRequest(from_date="2025-11-01", to_date="2025-11-02")
        body = build_backend_payload(request)
        assert body["time_range"] == {
            "start": "2025-11-01T00:00:00.000Z",
            "end": "2025-11-02T00:00:00.000Z",
        }

    def test_single_date_bound_is_ignored(self) -> None:
        body = build_backend_payload(SearchRequest(from_date="2025-11-01"))
        assert "time_range" not in body

    def test_saved_search_identity(self) -> None:
        request = SearchRequest(
            saved_search_id="saved-1",
            saved_search_name="Romance",
            saved_search_owner="analyst_1",
            saved_search_tags=["priority"],
        )
        body = build_backend_payload(request)

        assert body["saved_search_id"] == "saved-1"
        assert body["saved_search_name"] == "Romance"
        assert body["saved_search_owner"] == "analyst_1"
        assert body["saved_search_tags"] == ["priority"]

    def test_query_is_trimmed_in_text(self) -> None:
        assert build_backend_payload(SearchRequest(query="  hi  "))["text"] == "hi"
