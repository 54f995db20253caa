"""Static-header credential provider implementing ICredentialProvider.

Builds the optional auth headers for backend calls from settings:

- ``X-API-KEY``             when an API key is configured
- ``Authorization: Bearer`` when a bearer token is configured
- the forwarded identity header (IAP user email by default), copied from
  the inbound request context when the call originates from the HTTP API

Every header is optional; the result may be an empty dict.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from intelsearch.config.settings import Settings
from intelsearch.interfaces.credential_provider import ICredentialProvider
from intelsearch.utils.errors import CredentialError

logger = structlog.get_logger(logger_name=__name__)


class HeaderCredentialProvider(ICredentialProvider):
    """Produce auth headers from static settings and the request context."""

    def __init__(
        self,
        api_key: str = "",
        bearer_token: str = "",
        identity_header: str = "X-Goog-Authenticated-User-Email",
    ) -> None:
        self._api_key = api_key.strip()
        self._bearer_token = bearer_token.strip()
        self._identity_header = identity_header

    @classmethod
    def from_settings(cls, settings: Settings) -> HeaderCredentialProvider:
        return cls(
            api_key=settings.api_key,
            bearer_token=settings.bearer_token,
            identity_header=settings.forwarded_identity_header,
        )

    async def get_headers(self, context: dict[str, Any] | None = None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._api_key:
            headers["X-API-KEY"] = self._api_key
        if self._bearer_token:
            headers["Authorization"] = f"Bearer {self._bearer_token}"

        identity = self._forwarded_identity(context)
        if identity:
            headers[self._identity_header] = identity

        logger.debug("credential_headers_resolved", header_names=sorted(headers))
        return headers

    def _forwarded_identity(self, context: dict[str, Any] | None) -> str | None:
        if not context or not self._identity_header:
            return None
        inbound = context.get("headers")
        if inbound is None:
            return None
        if not isinstance(inbound, Mapping):
            raise CredentialError(
                message="Request context headers must be a mapping",
                provider_name=self.get_provider_name(),
            )

        # Inbound header names are case-insensitive.
        wanted = self._identity_header.lower()
        for name, value in inbound.items():
            if isinstance(name, str) and name.lower() == wanted and isinstance(value, str):
                return value.strip() or None
        return None

    def get_provider_name(self) -> str:
        return "header-credentials"
