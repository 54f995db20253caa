"""FastAPI routes for hybrid search and the review endpoints.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern; ``main._build_all`` populates
the state at startup.

Endpoint                         Method  Description
/api/v1/search                   POST    Run one search (degrades to mock data)
/api/v1/search/schema            GET     Filter vocabulary for the sidebar
/api/v1/search/history           GET     Recent search events
/api/v1/search/saved             GET     Saved searches
/api/v1/search/saved             POST    Save the current search
/api/v1/health                   GET     Health check + provider status
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query, Request

from intelsearch import __version__
from intelsearch.api.schemas import (
    ErrorResponse,
    HealthResponse,
    SavedSearchListResponse,
    SaveSearchResponse,
    SearchHistoryResponse,
)
from intelsearch.models.reviews import HybridSearchSchema, SaveSearchRequest
from intelsearch.models.search import SearchRequest, SearchResponse
from intelsearch.services.reviews_service import ReviewsService
from intelsearch.services.search_service import SearchService
from intelsearch.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_search_service(request: Request) -> SearchService:
    """Return the search service from application state."""
    return request.app.state.search_service


def _get_reviews_service(request: Request) -> ReviewsService:
    """Return the reviews service from application state."""
    return request.app.state.reviews_service


def _get_request_context(request: Request) -> dict[str, Any]:
    """Expose inbound headers to the credential provider (identity forwarding)."""
    return {"headers": dict(request.headers)}


SearchServiceDep = Annotated[SearchService, Depends(_get_search_service)]
ReviewsServiceDep = Annotated[ReviewsService, Depends(_get_reviews_service)]
RequestContextDep = Annotated[dict[str, Any], Depends(_get_request_context)]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.post(
    "/search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    summary="Run a hybrid search",
)
async def search(
    body: SearchRequest,
    search_service: SearchServiceDep,
    context: RequestContextDep,
) -> SearchResponse:
    """Run one search.  Backend failures return synthetic results, not errors."""
    return await search_service.search_intelligence(body, context)


@router.get(
    "/search/schema",
    response_model=HybridSearchSchema,
    summary="Hybrid search filter vocabulary",
)
async def search_schema(
    reviews_service: ReviewsServiceDep,
    context: RequestContextDep,
) -> HybridSearchSchema:
    return await reviews_service.get_hybrid_search_schema(context)


@router.get(
    "/search/history",
    response_model=SearchHistoryResponse,
    response_model_exclude_none=True,
    summary="Recent search events",
)
async def search_history(
    reviews_service: ReviewsServiceDep,
    context: RequestContextDep,
    limit: Annotated[int, Query()] = 10,
) -> SearchHistoryResponse:
    """Return recent search events; *limit* is clamped to ``[1, 200]``."""
    events = await reviews_service.get_search_history(limit=limit, context=context)
    return SearchHistoryResponse(events=events)


@router.get(
    "/search/saved",
    response_model=SavedSearchListResponse,
    response_model_exclude_none=True,
    summary="List saved searches",
)
async def list_saved_searches(
    reviews_service: ReviewsServiceDep,
    context: RequestContextDep,
    limit: Annotated[int, Query()] = 10,
    owner_only: bool = False,
) -> SavedSearchListResponse:
    items = await reviews_service.list_saved_searches(
        limit=limit,
        owner_only=owner_only,
        context=context,
    )
    return SavedSearchListResponse(items=items)


@router.post(
    "/search/saved",
    response_model=SaveSearchResponse,
    status_code=201,
    responses={502: {"model": ErrorResponse}},
    summary="Save a search",
)
async def save_search(
    body: SaveSearchRequest,
    reviews_service: ReviewsServiceDep,
    context: RequestContextDep,
) -> SaveSearchResponse:
    payload = await reviews_service.save_search(body, context)
    _logger.info("search_saved", name=body.name)
    return SaveSearchResponse.model_validate(payload)


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(search_service: SearchServiceDep) -> HealthResponse:
    """Return health, version, and which search provider is active."""
    return HealthResponse(
        status="ok",
        version=__version__,
        provider=search_service.provider_name,
        mock_mode=search_service.uses_mock_data,
        fallback_enabled=search_service.fallback_enabled,
    )
