"""Facet and suggestion derivation from a page of normalized results.

Facets here are page-local: counts reflect only the results returned in
this response, not the full backend result set.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from intelsearch.models.search import Facet, FacetOption, NormalizedResult

MAX_TAG_SUGGESTIONS = 5
MAX_TITLE_SUGGESTIONS = 3


def _facet(field: str, label: str, counts: Counter[str]) -> Facet:
    # Counter preserves first-seen insertion order.
    return Facet(
        field=field,
        label=label,
        options=[FacetOption(value=value, count=count) for value, count in counts.items()],
    )


def build_facets(results: Sequence[NormalizedResult]) -> list[Facet]:
    """Count sources and tags across *results*.

    Returns at most two facets, ``source`` then ``taxonomy``; a facet with
    no options is omitted.
    """
    source_counts: Counter[str] = Counter()
    tag_counts: Counter[str] = Counter()
    for result in results:
        if result.source:
            source_counts[result.source] += 1
        for tag in result.tags:
            tag_counts[tag] += 1

    facets: list[Facet] = []
    if source_counts:
        facets.append(_facet("source", "Sources", source_counts))
    if tag_counts:
        facets.append(_facet("taxonomy", "Taxonomy", tag_counts))
    return facets


def build_suggestions(results: Sequence[NormalizedResult]) -> list[str]:
    """Suggest refinements: the first tags of the page, else the first titles.

    All tags are flattened in result order, cut to the first five, then
    de-duplicated, so fewer than five suggestions may come back even when
    the page has more distinct tags.
    """
    flattened = [tag for result in results for tag in result.tags]
    if flattened:
        return list(dict.fromkeys(flattened[:MAX_TAG_SUGGESTIONS]))
    return [result.title for result in results[:MAX_TITLE_SUGGESTIONS]]
