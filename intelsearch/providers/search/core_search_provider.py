"""Hybrid-search backend adapter implementing ISearchProvider.

Issues exactly one ``POST {base}/reviews/search/query`` per call on an
injected ``httpx.AsyncClient`` and turns the raw hits into a normalized,
faceted :class:`SearchResponse`.

Response classification:

    2xx + JSON object      -> normalized response
    2xx + empty / not JSON -> ResponseParseError
    non-2xx                -> SearchBackendError(status, payload)
    no response at all     -> SearchTransportError
    no base URL            -> ConfigurationError

There are no retries here; the search service decides what a failure
means for the caller.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import httpx
from pydantic import ValidationError

from intelsearch.interfaces.credential_provider import ICredentialProvider
from intelsearch.interfaces.search_provider import ISearchProvider
from intelsearch.models.search import SearchRequest, SearchResponse, SearchStats
from intelsearch.services.facet_aggregator import build_facets, build_suggestions
from intelsearch.services.query_builder import build_backend_payload
from intelsearch.services.result_normalizer import normalize_results
from intelsearch.utils.errors import (
    ConfigurationError,
    ResponseParseError,
    SearchBackendError,
    SearchTransportError,
)
from intelsearch.utils.logging import get_logger
from intelsearch.utils.payloads import as_object, first_number

_SEARCH_PATH = "/reviews/search/query"
_BASE_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}
_MIN_SIMULATED_TOOK_MS = 90
_TOOK_PER_RESULT_MS = 42


def _read_error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        return {"message": "Failed to read error payload", "error": str(exc)}


class CoreSearchProvider(ISearchProvider):
    """Search provider backed by the hybrid (structured + vector) backend.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``; its timeout bounds each call.
    base_url:
        Backend root, e.g. ``https://api.example``.  Blank means unconfigured.
    credentials:
        Optional credential provider; its headers are merged into every
        request but never replace the JSON ``Accept``/``Content-Type`` pair.
    search_path:
        Path of the hybrid-search endpoint relative to *base_url*.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        credentials: ICredentialProvider | None = None,
        search_path: str = _SEARCH_PATH,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.strip().rstrip("/")
        self._credentials = credentials
        self._search_path = "/" + search_path.lstrip("/")
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # ISearchProvider implementation
    # ------------------------------------------------------------------

    async def search(
        self,
        request: SearchRequest,
        context: dict[str, Any] | None = None,
    ) -> SearchResponse:
        if not self.is_available():
            raise ConfigurationError(
                message="Search backend base URL is not configured",
                provider_name=self.get_provider_name(),
            )

        url = f"{self._base_url}{self._search_path}"
        body = build_backend_payload(request)
        headers = await self._build_headers(context)

        try:
            response = await self._http.post(url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise SearchTransportError(
                message=f"Core search request failed: {exc.__class__.__name__}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.is_success:
            raise SearchBackendError(
                message=f"Core search failed with status {response.status_code}",
                status=response.status_code,
                payload=_read_error_payload(response),
                provider_name=self.get_provider_name(),
            )

        data = self._parse_body(response)
        search_response = self._to_search_response(request, data)
        self._logger.info(
            "core_search_complete",
            query=request.query,
            page=request.page,
            returned=len(search_response.results),
            total=search_response.stats.total,
            took_ms=search_response.stats.took,
        )
        return search_response

    def get_provider_name(self) -> str:
        return "core-search"

    def is_available(self) -> bool:
        return bool(self._base_url)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _build_headers(self, context: dict[str, Any] | None) -> dict[str, str]:
        headers = dict(_BASE_HEADERS)
        if self._credentials is None:
            return headers

        try:
            extra = await self._credentials.get_headers(context)
        except Exception as exc:  # noqa: BLE001 -- credentials are best-effort
            self._logger.warning(
                "credential_headers_failed",
                provider=self._credentials.get_provider_name(),
                error=str(exc),
            )
            return headers

        reserved = {name.lower() for name in headers}
        for name, value in extra.items():
            if name.lower() not in reserved:
                headers[name] = value
        return headers

    def _parse_body(self, response: httpx.Response) -> dict[str, Any]:
        raw = response.text
        if not raw.strip():
            raise ResponseParseError(
                message="Core search returned an empty body",
                status=response.status_code,
                raw=raw,
                provider_name=self.get_provider_name(),
            )
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError, oversized integer literals, or nesting too deep.
            raise ResponseParseError(
                message=f"Core search returned invalid JSON: {exc}",
                status=response.status_code,
                raw=raw[:500],
                provider_name=self.get_provider_name(),
            ) from exc
        # A JSON body that is not an object is treated as carrying no results.
        return as_object(data)

    def _to_search_response(
        self,
        request: SearchRequest,
        data: dict[str, Any],
        now: datetime | None = None,
    ) -> SearchResponse:
        try:
            results = normalize_results(data.get("results"), now=now)

            total = first_number([data.get("total")])
            took = first_number([data.get("elapsed_ms"), data.get("duration_ms")])
            if total is None:
                total = len(results)
            if took is None:
                took = max(_MIN_SIMULATED_TOOK_MS, len(results) * _TOOK_PER_RESULT_MS)

            return SearchResponse(
                results=results,
                stats=SearchStats(
                    query=request.query,
                    total=max(int(total), 0),
                    took=max(int(took), 0),
                    page=request.page,
                    page_size=request.page_size,
                ),
                facets=build_facets(results),
                suggestions=build_suggestions(results),
            )
        except ValidationError as exc:
            raise ResponseParseError(
                message=f"Core search response could not be normalized: {exc.error_count()} errors",
                status=200,
                provider_name=self.get_provider_name(),
            ) from exc
        except (ArithmeticError, TypeError, ValueError, RecursionError) as exc:
            raise ResponseParseError(
                message=f"Core search response could not be normalized: {exc}",
                status=200,
                provider_name=self.get_provider_name(),
            ) from exc
