"""Search provider implementations.

CoreSearchProvider talks to the live hybrid-search backend;
MockSearchProvider answers from the synthetic dataset and backs the
degradation path.  Both implement ISearchProvider, so the search service
uses either one transparently via dependency injection.
"""

from intelsearch.providers.search.core_search_provider import CoreSearchProvider
from intelsearch.providers.search.mock_search_provider import MockSearchProvider

__all__ = ["CoreSearchProvider", "MockSearchProvider"]
