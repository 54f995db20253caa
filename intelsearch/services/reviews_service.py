"""Saved searches, search history and the hybrid-search schema.

These are opaque read/write endpoints on the backend next to the search
endpoint:

    GET  /reviews/search/history?limit=N
    GET  /reviews/search/saved?limit=N[&owner_only=true]
    POST /reviews/search/saved
    GET  /reviews/search/schema

Reads never fail: when the backend is unconfigured or errors, history and
saved searches come from the synthetic dataset and the schema from the
YAML snapshot.  The schema is cached because it changes rarely and every
console page load needs it.  Writes do propagate errors, because a silently
dropped save would be worse than a visible failure.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog

from intelsearch.interfaces.cache_provider import ICacheProvider
from intelsearch.interfaces.credential_provider import ICredentialProvider
from intelsearch.models.reviews import (
    HybridSearchSchema,
    SavedSearchRecord,
    SaveSearchRequest,
    SearchHistoryEvent,
)
from intelsearch.services.mock_dataset import mock_saved_searches, mock_search_history
from intelsearch.services.reviews_mapping import (
    map_history_event,
    map_hybrid_search_schema,
    map_saved_search,
    merge_schema_with_defaults,
)
from intelsearch.utils.errors import (
    IntelSearchError,
    ResponseParseError,
    SearchBackendError,
    SearchTransportError,
)
from intelsearch.utils.logging import get_logger

_HISTORY_PATH = "/reviews/search/history"
_SAVED_PATH = "/reviews/search/saved"
_SCHEMA_PATH = "/reviews/search/schema"
_SCHEMA_CACHE_KEY = "hybrid_search_schema"

MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 200


def clamp_limit(limit: int) -> int:
    """Clamp a list limit into ``[1, 200]``."""
    return max(MIN_LIST_LIMIT, min(int(limit), MAX_LIST_LIMIT))


class ReviewsService:
    """Reads and writes the review endpoints with synthetic fallbacks.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``.
    base_url:
        Backend root; blank means unconfigured (synthetic data only).
    default_schema:
        Schema snapshot used when the live schema is unavailable and to
        fill empty fields of the live one.
    cache:
        Cache for the live schema.
    credentials:
        Optional credential provider for backend auth headers.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        default_schema: HybridSearchSchema,
        cache: ICacheProvider,
        credentials: ICredentialProvider | None = None,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.strip().rstrip("/")
        self._default_schema = default_schema
        self._cache = cache
        self._credentials = credentials
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def backend_configured(self) -> bool:
        return bool(self._base_url)

    # -- Public API -----------------------------------------------------------

    async def get_search_history(
        self,
        limit: int = 10,
        context: dict[str, Any] | None = None,
    ) -> list[SearchHistoryEvent]:
        limit = clamp_limit(limit)
        if not self.backend_configured:
            return mock_search_history()[:limit]

        try:
            payload = await self._get_json(_HISTORY_PATH, {"limit": str(limit)}, context)
        except IntelSearchError as exc:
            self._logger.warning("history_fallback_engaged", error=str(exc))
            return mock_search_history()[:limit]

        if not isinstance(payload, dict):
            return mock_search_history()[:limit]
        events = payload.get("events")
        if not isinstance(events, list):
            return []
        return [map_history_event(item) for item in events if isinstance(item, dict)][:limit]

    async def list_saved_searches(
        self,
        limit: int = 10,
        owner_only: bool = False,
        context: dict[str, Any] | None = None,
    ) -> list[SavedSearchRecord]:
        limit = clamp_limit(limit)
        if not self.backend_configured:
            return mock_saved_searches()[:limit]

        params = {"limit": str(limit)}
        if owner_only:
            params["owner_only"] = "true"
        try:
            payload = await self._get_json(_SAVED_PATH, params, context)
        except IntelSearchError as exc:
            self._logger.warning("saved_searches_fallback_engaged", error=str(exc))
            return mock_saved_searches()[:limit]

        if not isinstance(payload, dict):
            return mock_saved_searches()[:limit]
        items = payload.get("items")
        if not isinstance(items, list):
            return []
        return [map_saved_search(item) for item in items if isinstance(item, dict)][:limit]

    async def get_hybrid_search_schema(
        self,
        context: dict[str, Any] | None = None,
    ) -> HybridSearchSchema:
        cached = await self._cache.get(_SCHEMA_CACHE_KEY)
        if cached is not None:
            return cached
        if not self.backend_configured:
            return self._default_schema

        try:
            payload = await self._get_json(_SCHEMA_PATH, None, context)
        except IntelSearchError as exc:
            self._logger.warning("schema_fallback_engaged", error=str(exc))
            return self._default_schema

        if not isinstance(payload, dict):
            return self._default_schema
        schema = merge_schema_with_defaults(map_hybrid_search_schema(payload), self._default_schema)
        await self._cache.set(_SCHEMA_CACHE_KEY, schema)
        return schema

    async def save_search(
        self,
        request: SaveSearchRequest,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Persist *request*; returns the backend's response body.

        Raises
        ------
        SearchBackendError
            The backend rejected the save (status and body attached).
        SearchTransportError
            The backend could not be reached.
        """
        if not self.backend_configured:
            # Local development without a backend still gets an id back.
            return {"search_id": f"mock-saved-{int(time.time() * 1000)}"}

        body = {
            "name": request.name,
            "params": request.params,
            "search_id": request.search_id,
            "favorite": request.favorite,
            "tags": request.tags,
        }
        headers = await self._headers(context, json_body=True)
        try:
            response = await self._http.post(f"{self._base_url}{_SAVED_PATH}", json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise SearchTransportError(
                message=f"Save search request failed: {exc}",
                provider_name="reviews",
            ) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not response.is_success:
            detail = payload.get("detail") if isinstance(payload, dict) else None
            raise SearchBackendError(
                message=detail if isinstance(detail, str) else "Failed to save search",
                status=response.status_code,
                payload=payload,
                provider_name="reviews",
            )

        self._logger.info("saved_search_created", name=request.name, status=response.status_code)
        return payload if isinstance(payload, dict) else {}

    # -- Private helpers ------------------------------------------------------

    async def _headers(self, context: dict[str, Any] | None, json_body: bool = False) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self._credentials is None:
            return headers
        try:
            extra = await self._credentials.get_headers(context)
        except Exception as exc:  # noqa: BLE001 -- credentials are best-effort
            self._logger.warning("credential_headers_failed", error=str(exc))
            return headers
        for name, value in extra.items():
            headers.setdefault(name, value)
        return headers

    async def _get_json(
        self,
        path: str,
        params: dict[str, str] | None,
        context: dict[str, Any] | None,
    ) -> Any:
        headers = await self._headers(context)
        try:
            response = await self._http.get(f"{self._base_url}{path}", params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise SearchTransportError(
                message=f"Review service request failed: {exc}",
                provider_name="reviews",
            ) from exc

        if not response.is_success:
            raise SearchBackendError(
                message=f"Review service request failed with status {response.status_code}",
                status=response.status_code,
                provider_name="reviews",
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseParseError(
                message="Review service returned invalid JSON",
                status=response.status_code,
                provider_name="reviews",
            ) from exc
