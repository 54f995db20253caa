"""Search orchestration with graceful degradation.

:class:`SearchService` is the single caller-facing entry point.  It runs
the primary provider (normally the live hybrid-search backend) and, when
that fails for any reason the provider layer can report, answers from the
synthetic provider instead.  A degraded response has exactly the same
shape as a live one; the only signal is the ``search_fallback_engaged``
warning in the log.

Overlapping calls are independent: the service holds no per-call state,
so ordering between in-flight searches is the caller's concern.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from intelsearch.interfaces.search_provider import ISearchProvider
from intelsearch.models.filters import FilterState
from intelsearch.models.search import SearchRequest, SearchResponse
from intelsearch.services.query_builder import SearchOverrides, build_search_request, load_more
from intelsearch.utils.errors import IntelSearchError
from intelsearch.utils.logging import get_logger


class SearchService:
    """Runs searches against a primary provider with a synthetic fallback.

    Parameters
    ----------
    primary:
        The provider tried first.
    fallback:
        Provider used when *primary* fails.  Must not raise.
    enable_fallback:
        When ``False`` the primary provider's errors propagate unchanged.
        Useful for diagnosing a backend integration.
    """

    def __init__(
        self,
        primary: ISearchProvider,
        fallback: ISearchProvider,
        enable_fallback: bool = True,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._enable_fallback = enable_fallback
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def provider_name(self) -> str:
        return self._primary.get_provider_name()

    @property
    def uses_mock_data(self) -> bool:
        return self._primary.get_provider_name() == "mock"

    @property
    def fallback_enabled(self) -> bool:
        return self._enable_fallback

    # -- Public API -----------------------------------------------------------

    async def search_intelligence(
        self,
        request: SearchRequest | dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> SearchResponse:
        """Execute one search; degrade to synthetic data on failure.

        Parameters
        ----------
        request:
            A :class:`SearchRequest`, or a dict in either snake_case or the
            console's camelCase, which is validated into one.
        context:
            Request context forwarded to the provider (inbound headers for
            the credential provider).

        Raises
        ------
        pydantic.ValidationError
            If a dict *request* is malformed (e.g. ``pageSize`` of 0).
        intelsearch.utils.errors.IntelSearchError
            Only when fallback is disabled.
        """
        if not isinstance(request, SearchRequest):
            request = SearchRequest.model_validate(request)

        try:
            return await self._primary.search(request, context)
        except (IntelSearchError, httpx.HTTPError) as exc:
            self._logger.warning(
                "search_fallback_engaged",
                provider=self._primary.get_provider_name(),
                error_type=type(exc).__name__,
                status=getattr(exc, "status", None),
                error=str(exc),
                fallback_enabled=self._enable_fallback,
            )
            if not self._enable_fallback:
                raise

        return await self._fallback.search(request, context)

    async def search_state(
        self,
        state: FilterState,
        overrides: SearchOverrides | None = None,
        *,
        include_saved_search: bool | None = None,
        context: dict[str, Any] | None = None,
    ) -> tuple[SearchRequest, SearchResponse]:
        """Build the first-page request from *state* and run it.

        Returns the request alongside the response so the caller can pass
        it to :meth:`load_more` later.
        """
        request = build_search_request(
            state,
            overrides,
            include_saved_search=include_saved_search,
        )
        return request, await self.search_intelligence(request, context)

    async def load_more(
        self,
        last_request: SearchRequest,
        context: dict[str, Any] | None = None,
    ) -> tuple[SearchRequest, SearchResponse]:
        """Fetch the page after *last_request* with otherwise identical filters."""
        request = load_more(last_request)
        return request, await self.search_intelligence(request, context)
