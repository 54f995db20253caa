"""Provider interfaces (abstract base classes) for intelsearch."""

from intelsearch.interfaces.cache_provider import ICacheProvider
from intelsearch.interfaces.credential_provider import ICredentialProvider
from intelsearch.interfaces.search_provider import ISearchProvider

__all__ = ["ICacheProvider", "ICredentialProvider", "ISearchProvider"]
