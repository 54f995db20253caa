"""Synthetic search provider implementing ISearchProvider.

Answers from the fixed dataset in :mod:`intelsearch.services.mock_dataset`.
It is used when no backend is configured, when mock data is forced, and as
the substitute answer whenever the live backend fails.  It never raises.
"""

from __future__ import annotations

from typing import Any

import structlog

from intelsearch.interfaces.search_provider import ISearchProvider
from intelsearch.models.search import NormalizedResult, SearchRequest, SearchResponse, SearchStats
from intelsearch.services.mock_dataset import MOCK_SEARCH_RESULTS, mock_facets, mock_suggestions

logger = structlog.get_logger(logger_name=__name__)


def _simulated_took(query: str) -> int:
    return len(query) * 9 + 42


def _matches_query(result: NormalizedResult, needle: str) -> bool:
    haystack = f"{result.title} {result.snippet} {' '.join(result.tags)}".lower()
    return needle in haystack


class MockSearchProvider(ISearchProvider):
    """In-memory search over the synthetic dataset.

    Filters are applied in order: free-text substring over title, snippet
    and tags; then sources; then taxonomy (any tag matches).  All
    comparisons are case-insensitive.  Facets and suggestions are the fixed
    synthetic ones regardless of the filters.

    Parameters
    ----------
    dataset:
        Results to search.  Defaults to the module-level fixtures.
    """

    def __init__(self, dataset: tuple[NormalizedResult, ...] = MOCK_SEARCH_RESULTS) -> None:
        self._dataset = dataset

    async def search(
        self,
        request: SearchRequest,
        context: dict[str, Any] | None = None,
    ) -> SearchResponse:
        needle = request.query.strip().lower()
        sources = {source.lower() for source in request.sources or []}
        taxonomy = {tag.lower() for tag in request.taxonomy or []}

        filtered = list(self._dataset)
        if needle:
            filtered = [result for result in filtered if _matches_query(result, needle)]
        if sources:
            filtered = [result for result in filtered if result.source.lower() in sources]
        if taxonomy:
            filtered = [
                result
                for result in filtered
                if any(tag.lower() in taxonomy for tag in result.tags)
            ]

        start = (request.page - 1) * request.page_size
        page = filtered[start : start + request.page_size]

        logger.debug(
            "mock_search_complete",
            query=request.query,
            total=len(filtered),
            returned=len(page),
        )
        return SearchResponse(
            results=[result.model_copy(deep=True) for result in page],
            stats=SearchStats(
                query=request.query,
                total=len(filtered),
                took=_simulated_took(request.query),
                page=request.page,
                page_size=request.page_size,
            ),
            facets=mock_facets(),
            suggestions=mock_suggestions(),
        )

    def get_provider_name(self) -> str:
        return "mock"

    def is_available(self) -> bool:
        return True
