"""Abstract base class for hybrid-search providers.

Defines the contract shared by the live backend adapter and the synthetic
in-memory provider used on the degradation path.  The search service only
ever talks to this interface, so swapping the live backend for fixtures
needs no change to the orchestration code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from intelsearch.models.search import SearchRequest, SearchResponse


# Concrete implementations: CoreSearchProvider and MockSearchProvider
# (intelsearch/providers/search/).
class ISearchProvider(ABC):
    """Contract for services that answer a :class:`SearchRequest`."""

    @abstractmethod
    async def search(
        self,
        request: SearchRequest,
        context: dict[str, Any] | None = None,
    ) -> SearchResponse:
        """Execute one search and return a normalized, faceted response.

        Parameters
        ----------
        request:
            The validated search request.
        context:
            Opaque request context (e.g. inbound headers) handed to the
            credential provider.  May be ``None``.

        Raises
        ------
        intelsearch.utils.errors.IntelSearchError
            Transport, backend, parse or configuration failures.  The
            search service turns these into a degraded response.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"core-search"`` or ``"mock"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured."""
