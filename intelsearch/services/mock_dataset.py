"""Synthetic dataset served on the degradation path.

Everything here is module-level and immutable: results are frozen models
held in tuples, and callers receive freshly built lists and response
objects, so one caller can never alter what the next one sees.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from intelsearch.models.reviews import SavedSearchRecord, SearchHistoryEvent
from intelsearch.models.search import Facet, FacetOption, NormalizedResult
from intelsearch.utils.time_ranges import to_iso

# ---------------------------------------------------------------------------
# Search results
# ---------------------------------------------------------------------------
MOCK_SEARCH_RESULTS: tuple[NormalizedResult, ...] = (
    NormalizedResult(
        id="result-1",
        title="Crypto wallet cluster links Pattern-3 to flagged exchange",
        snippet=(
            "Blockchain analysis from 12 Oct indicates Pattern-3 rerouted funds through "
            "Exchange X. Discrepancies match known pig-butchering profile."
        ),
        source="blockchain",
        tags=["crypto-scam", "pattern-3", "exchange-x"],
        score=0.92,
        occurred_at="2025-11-18T13:04:00Z",
        confidence=0.91,
    ),
    NormalizedResult(
        id="result-2",
        title="Chatter spike referencing new recruitment tactic",
        snippet=(
            "Forum thread translated from Serbian discusses incentives offered to "
            "vulnerable populations in border towns."
        ),
        source="open-source",
        tags=["recruitment", "border", "serbia"],
        score=0.88,
        occurred_at="2025-11-17T21:12:00Z",
        confidence=0.87,
    ),
    NormalizedResult(
        id="result-3",
        title="NGO intake form flags underage labor risk",
        snippet=(
            "Caseworker submitted verified statement from shelter partner documenting "
            "suspicious movement through warehouse district."
        ),
        source="intake",
        tags=["child-labor", "warehouse", "ngo"],
        score=0.85,
        occurred_at="2025-11-17T16:33:00Z",
        confidence=0.94,
    ),
    NormalizedResult(
        id="result-4",
        title="Financial transfer pattern aligns with prior investment fraud ring",
        snippet=(
            "Clustered transfers originating from shell companies cross-referenced with "
            "FinCEN alert #5815."
        ),
        source="financial",
        tags=["finance", "shell", "fincen"],
        score=0.81,
        occurred_at="2025-11-16T09:42:00Z",
        confidence=0.83,
    ),
    NormalizedResult(
        id="result-5",
        title="Airbnb reviews indicate possible safehouse turnover",
        snippet=(
            "Automated model flagged anomalous reservations with single-night stays and "
            "repeated burner accounts."
        ),
        source="open-source",
        tags=["safehouse", "lodging", "pattern"],
        score=0.79,
        occurred_at="2025-11-15T19:58:00Z",
        confidence=0.8,
    ),
)

# Fixed facet counts; they describe the whole synthetic corpus, not a page.
_MOCK_FACET_SPEC: tuple[tuple[str, str, tuple[tuple[str, int], ...]], ...] = (
    (
        "source",
        "Sources",
        (("customs", 4), ("intake", 8), ("open-source", 12), ("financial", 5)),
    ),
    (
        "taxonomy",
        "Taxonomy",
        (("crypto-scam", 14), ("romance-scam", 6), ("pattern-3", 4), ("finance", 5)),
    ),
)

MOCK_SUGGESTIONS: tuple[str, ...] = (
    "group-7 network",
    "safehouse turnover",
    "intake backlog",
)


def mock_facets() -> list[Facet]:
    """Return a fresh copy of the fixed synthetic facets."""
    return [
        Facet(
            field=field,
            label=label,
            options=[FacetOption(value=value, count=count) for value, count in options],
        )
        for field, label, options in _MOCK_FACET_SPEC
    ]


def mock_suggestions() -> list[str]:
    return list(MOCK_SUGGESTIONS)


# ---------------------------------------------------------------------------
# Search history and saved searches
# ---------------------------------------------------------------------------
def mock_search_history(now: datetime | None = None) -> list[SearchHistoryEvent]:
    """Return the synthetic history log, newest first, stamped relative to *now*."""
    now = now or datetime.now(timezone.utc)
    return [
        SearchHistoryEvent(
            id="mock-history-1",
            actor="analyst_1",
            created_at=to_iso(now - timedelta(minutes=12)),
            query="romance scam remittances",
            classification="romance_scam",
            result_count=8,
            total=32,
            params={"query": "romance scam remittances", "taxonomy": ["romance_scam"]},
        ),
        SearchHistoryEvent(
            id="mock-history-2",
            actor="analyst_2",
            created_at=to_iso(now - timedelta(minutes=45)),
            query="wallet:0x94df intake",
            case_id="case-102",
            result_count=3,
            total=3,
            params={"text": "wallet:0x94df intake", "case_id": "case-102"},
        ),
    ]


def mock_saved_searches(now: datetime | None = None) -> list[SavedSearchRecord]:
    now = now or datetime.now(timezone.utc)
    return [
        SavedSearchRecord(
            id="saved-mock-1",
            name="High-risk romance scams",
            owner="analyst_1",
            favorite=True,
            tags=["romance", "priority"],
            created_at=to_iso(now - timedelta(hours=4)),
            params={"query": "romance", "taxonomy": ["romance_scam"], "sources": ["intake"]},
        ),
        SavedSearchRecord(
            id="saved-mock-2",
            name="Crypto investment chatter",
            owner="shared",
            favorite=False,
            tags=["crypto"],
            created_at=to_iso(now - timedelta(hours=24)),
            params={
                "query": "yield guarantee",
                "taxonomy": ["crypto_investment"],
                "sources": ["open-source"],
            },
        ),
    ]


__all__ = [
    "MOCK_SEARCH_RESULTS",
    "MOCK_SUGGESTIONS",
    "mock_facets",
    "mock_saved_searches",
    "mock_search_history",
    "mock_suggestions",
]
