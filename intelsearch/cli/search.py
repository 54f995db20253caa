"""Standalone CLI for running one hybrid search.

Usage::

    python -m intelsearch.cli.search "wallet cluster"
    python -m intelsearch.cli.search "" --source intake --taxonomy crypto-scam
    python -m intelsearch.cli.search romance --entity email=bob@example.com:prefix --preset 7d
    python -m intelsearch.cli.search romance --page 2 --page-size 5 --json

Builds a filter state from the arguments, runs it through the same search
service the API uses (including the synthetic fallback) and prints either
a result table or the JSON response.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from intelsearch.models.filters import FilterState
from intelsearch.models.search import MAX_PAGE_SIZE, MatchMode, SearchResponse

_MATCH_MODES = {mode.value for mode in MatchMode}
_TITLE_WIDTH = 60


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def parse_entity_arg(text: str) -> tuple[str, str, MatchMode]:
    """Parse ``type=value[:mode]`` into ``(type, value, match_mode)``.

    The mode suffix is only split off when it names a real match mode, so
    values that contain colons (URLs, IPv6) survive intact.
    """
    entity_type, sep, rest = text.partition("=")
    if not sep or not entity_type.strip() or not rest.strip():
        raise argparse.ArgumentTypeError(f"expected type=value[:mode], got {text!r}")

    value, mode = rest, MatchMode.EXACT
    head, colon, tail = rest.rpartition(":")
    if colon and tail.lower() in _MATCH_MODES and head.strip():
        value, mode = head, MatchMode(tail.lower())
    return entity_type.strip(), value.strip(), mode


def _page_size(text: str) -> int:
    size = int(text)
    if not 1 <= size <= MAX_PAGE_SIZE:
        raise argparse.ArgumentTypeError(f"page size must be between 1 and {MAX_PAGE_SIZE}")
    return size


def _page(text: str) -> int:
    page = int(text)
    if page < 1:
        raise argparse.ArgumentTypeError("page must be 1 or greater")
    return page


def build_state(args: argparse.Namespace) -> FilterState:
    """Turn parsed arguments into a :class:`FilterState`."""
    state = FilterState(query=args.query, page_size=args.page_size)
    for source in args.sources:
        state = state.toggle_facet("sources", source)
    for tag in args.taxonomy:
        state = state.toggle_facet("taxonomy", tag)
    for dataset in args.datasets:
        state = state.toggle_facet("datasets", dataset)
    if args.preset:
        state = state.toggle_time_preset(args.preset)
    for entity_type, value, mode in args.entities:
        state = state.add_entity_filter(entity_type, value, mode)
    return state


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m intelsearch.cli.search",
        description="Run a hybrid intelligence search from the command line.",
    )
    parser.add_argument("query", nargs="?", default="", help="Free-text query (may be empty).")
    parser.add_argument(
        "--source", dest="sources", action="append", default=[], help="Source facet (repeatable)."
    )
    parser.add_argument(
        "--taxonomy", action="append", default=[], help="Taxonomy facet (repeatable)."
    )
    parser.add_argument(
        "--dataset", dest="datasets", action="append", default=[], help="Dataset (repeatable)."
    )
    parser.add_argument(
        "--entity",
        dest="entities",
        action="append",
        default=[],
        type=parse_entity_arg,
        help="Entity filter as type=value[:exact|prefix|contains] (repeatable).",
    )
    parser.add_argument("--preset", default=None, help="Time preset such as 24h, 7d or 30d.")
    parser.add_argument("--page", type=_page, default=1)
    parser.add_argument("--page-size", dest="page_size", type=_page_size, default=10)
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output the response as JSON instead of a table.",
    )
    return parser


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def format_table(response: SearchResponse) -> str:
    """Render *response* as a plain-text table plus facets and suggestions."""
    stats = response.stats
    lines = [
        f"Query: {stats.query or '(all)'}  |  {stats.total} total  |  "
        f"page {stats.page} ({stats.page_size}/page)  |  {stats.took} ms",
        "",
    ]
    if not response.results:
        lines.append("No results.")
    for result in response.results:
        title = result.title
        if len(title) > _TITLE_WIDTH:
            title = title[: _TITLE_WIDTH - 3] + "..."
        lines.append(f"{result.score:4.2f}  {result.source:<12}  {title}")
        if result.tags:
            lines.append(f"      tags: {', '.join(result.tags)}")

    for facet in response.facets:
        options = ", ".join(f"{option.value} ({option.count})" for option in facet.options)
        lines.append("")
        lines.append(f"{facet.label}: {options}")
    if response.suggestions:
        lines.append("")
        lines.append(f"Try: {', '.join(response.suggestions)}")
    return "\n".join(lines)


def _to_json(response: SearchResponse) -> str:
    payload: dict[str, Any] = response.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(payload, indent=2)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace) -> int:
    # Deferred so logging is configured from the environment first.
    import httpx

    from intelsearch.config.settings import Settings
    from intelsearch.main import build_search_service
    from intelsearch.services.query_builder import build_search_request
    from intelsearch.utils.errors import IntelSearchError

    settings = Settings()
    state = build_state(args)
    request = build_search_request(state, page=args.page)

    async with httpx.AsyncClient(timeout=settings.search_timeout) as http_client:
        service = build_search_service(settings, http_client=http_client)
        try:
            response = await service.search_intelligence(request)
        except IntelSearchError as exc:
            print(f"Search failed: {exc}", file=sys.stderr)
            return 1

    print(_to_json(response) if args.json_output else format_table(response))
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse arguments, run the search, exit with its status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
