"""Unit tests for the search CLI (intelsearch.cli.search)."""

from __future__ import annotations

import argparse
import json
from unittest.mock import AsyncMock, patch

import pytest

from intelsearch.cli.search import (
    _build_parser,
    _run,
    build_state,
    format_table,
    main,
    parse_entity_arg,
)
from intelsearch.config.settings import Settings
from intelsearch.models.search import (
    Facet,
    FacetOption,
    MatchMode,
    SearchResponse,
    SearchStats,
)
from intelsearch.utils.errors import SearchTransportError


def _response(results: list, **stats) -> SearchResponse:
    fields = {"query": "romance", "total": len(results), "took": 12, "page": 1, "page_size": 10}
    fields.update(stats)
    return SearchResponse(
        results=results,
        stats=SearchStats(**fields),
        facets=[
            Facet(
                field="source",
                label="Sources",
                options=[FacetOption(value="intake", count=2)],
            )
        ],
        suggestions=["romance_scam"],
    )


# ======================================================================
# Argument parsing
# ======================================================================


class TestParseEntityArg:
    def test_type_and_value(self) -> None:
        assert parse_entity_arg("email=bob@example.com") == (
            "email",
            "bob@example.com",
            MatchMode.EXACT,
        )

    def test_explicit_mode(self) -> None:
        assert parse_entity_arg("phone=+44:prefix") == ("phone", "+44", MatchMode.PREFIX)

    def test_colon_in_value_is_kept(self) -> None:
        assert parse_entity_arg("url=https://x.example:8443") == (
            "url",
            "https://x.example:8443",
            MatchMode.EXACT,
        )

    @pytest.mark.parametrize("text", ["novalue", "=value", "email=", "email=   "])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_entity_arg(text)


class TestBuildState:
    def test_all_options(self) -> None:
        args = _build_parser().parse_args(
            [
                "romance",
                "--source",
                "intake",
                "--taxonomy",
                "romance_scam",
                "--dataset",
                "customs",
                "--entity",
                "email=bob@example.com:contains",
                "--preset",
                "7d",
                "--page-size",
                "5",
            ]
        )
        state = build_state(args)

        assert state.query == "romance"
        assert state.sources == frozenset({"intake"})
        assert state.taxonomy == frozenset({"romance_scam"})
        assert state.datasets == frozenset({"customs"})
        assert state.time_preset == "7d"
        assert state.page_size == 5
        assert state.entities[0].value == "bob@example.com"
        assert state.entities[0].match_mode is MatchMode.CONTAINS

    def test_defaults(self) -> None:
        args = _build_parser().parse_args([])
        state = build_state(args)

        assert state.query == ""
        assert state.time_preset is None
        assert args.page == 1
        assert args.json_output is False

    @pytest.mark.parametrize("argv", [["--page-size", "0"], ["--page-size", "101"], ["--page", "0"]])
    def test_out_of_range_pagination_is_rejected(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(argv)


# ======================================================================
# Output
# ======================================================================


class TestFormatTable:
    def test_results(self, make_result) -> None:
        result = make_result(title="T" * 80, score=0.91, tags=["ponzi"])
        table = format_table(_response([result]))

        assert "Query: romance" in table
        assert "1 total" in table
        assert "0.91" in table
        assert "T" * 57 + "..." in table
        assert "tags: ponzi" in table
        assert "Sources: intake (2)" in table
        assert "Try: romance_scam" in table

    def test_no_results(self) -> None:
        table = format_table(_response([], query=""))
        assert "Query: (all)" in table
        assert "No results." in table


# ======================================================================
# Entry point
# ======================================================================


class TestRun:
    @pytest.mark.asyncio
    async def test_json_output_uses_camel_case(self, capsys, make_result) -> None:
        args = _build_parser().parse_args(["romance", "--json"])
        service = AsyncMock()
        service.search_intelligence.return_value = _response([make_result()])

        with patch("intelsearch.main.build_search_service", return_value=service):
            code = await _run(args)

        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["stats"]["pageSize"] == 10
        assert payload["results"][0]["occurredAt"] == "2025-11-18T13:04:00.000Z"
        assert "confidence" not in payload["results"][0]

    @pytest.mark.asyncio
    async def test_strict_failure_returns_one(self, capsys) -> None:
        args = _build_parser().parse_args(["romance"])
        service = AsyncMock()
        service.search_intelligence.side_effect = SearchTransportError("down")

        with patch("intelsearch.main.build_search_service", return_value=service):
            code = await _run(args)

        assert code == 1
        assert "Search failed" in capsys.readouterr().err

    def test_main_with_mock_data(self, capsys, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("USE_MOCK_DATA", "true")
        with patch("intelsearch.config.settings.Settings", lambda: Settings(_env_file=None)):
            with pytest.raises(SystemExit) as exc_info:
                main(["crypto"])

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "Crypto wallet cluster" in out
