"""Unit tests for page-local facets and suggestions."""

from __future__ import annotations

from intelsearch.services.facet_aggregator import build_facets, build_suggestions


class TestBuildFacets:
    def test_empty_page_has_no_facets(self) -> None:
        assert build_facets([]) == []

    def test_counts_sources_and_tags(self, make_result) -> None:
        results = [
            make_result(id="a", source="intake", tags=["ponzi", "crypto"]),
            make_result(id="b", source="vector", tags=["ponzi"]),
            make_result(id="c", source="intake", tags=[]),
        ]
        source, taxonomy = build_facets(results)

        assert (source.field, source.label) == ("source", "Sources")
        assert {o.value: o.count for o in source.options} == {"intake": 2, "vector": 1}
        assert (taxonomy.field, taxonomy.label) == ("taxonomy", "Taxonomy")
        assert {o.value: o.count for o in taxonomy.options} == {"ponzi": 2, "crypto": 1}

    def test_two_results_with_shared_tag(self, make_result) -> None:
        results = [
            make_result(id="a", source="structured", tags=["ponzi", "crypto"]),
            make_result(id="b", source="vector", tags=["ponzi"]),
        ]
        source, taxonomy = build_facets(results)

        assert {o.value for o in source.options} == {"structured", "vector"}
        assert {o.value: o.count for o in taxonomy.options} == {"ponzi": 2, "crypto": 1}

    def test_options_in_first_seen_order(self, make_result) -> None:
        results = [
            make_result(source="vector"),
            make_result(source="intake"),
            make_result(source="vector"),
        ]
        (source,) = build_facets(results)
        assert [o.value for o in source.options] == ["vector", "intake"]

    def test_taxonomy_omitted_without_tags(self, make_result) -> None:
        facets = build_facets([make_result(tags=[])])
        assert [facet.field for facet in facets] == ["source"]

    def test_counts_sum_to_page_size(self, make_result) -> None:
        results = [make_result(id=str(i), source=f"s{i % 3}") for i in range(7)]
        (source,) = build_facets(results)
        assert sum(o.count for o in source.options) == 7


class TestBuildSuggestions:
    def test_first_five_tags_deduplicated(self, make_result) -> None:
        results = [
            make_result(tags=["a", "b", "a"]),
            make_result(tags=["c", "d", "e", "f"]),
        ]
        # Cut to five first, then de-duplicated.
        assert build_suggestions(results) == ["a", "b", "c", "d"]

    def test_titles_when_no_tags(self, make_result) -> None:
        results = [make_result(title=f"T{i}") for i in range(5)]
        assert build_suggestions(results) == ["T0", "T1", "T2"]

    def test_empty_page(self) -> None:
        assert build_suggestions([]) == []
