"""Abstract base class for credential providers.

A credential provider turns the current request context into extra HTTP
headers for backend calls: an API key, a bearer token, and/or a forwarded
identity header.  Every header is optional and the map may be empty.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICredentialProvider(ABC):
    """Contract for services that produce backend auth headers."""

    @abstractmethod
    async def get_headers(self, context: dict[str, Any] | None = None) -> dict[str, str]:
        """Return the headers to merge into an outgoing backend request.

        Parameters
        ----------
        context:
            Request-scoped data; ``context["headers"]`` holds the inbound
            request headers when the call originates from the HTTP API.

        Raises
        ------
        intelsearch.utils.errors.CredentialError
            If a configured credential could not be produced.  Callers
            proceed without extra headers in that case.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logging."""
