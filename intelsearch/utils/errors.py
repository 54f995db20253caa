"""Custom exception hierarchy for intelsearch.

All application exceptions inherit from :class:`IntelSearchError`, which
carries an optional ``provider_name`` so error handlers can identify which
backend integration (e.g. "core-search", "reviews", "credentials") caused
the failure.

    IntelSearchError  (base -- catch-all for any intelsearch error)
    +-- ConfigurationError   (missing base URL / invalid settings)
    +-- CredentialError      (credential provider could not build headers)
    +-- SearchTransportError (no HTTP response at all: connect, timeout)
    +-- SearchBackendError   (non-2xx response, carries status + body)
    +-- ResponseParseError   (2xx response with an empty or non-JSON body)

The search fallback controller catches every subclass except
``CredentialError`` (which the transport layer swallows itself) and
substitutes synthetic data instead of propagating.
"""

from __future__ import annotations

from typing import Any


class IntelSearchError(Exception):
    """Base exception for all intelsearch errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[core-search] Connection refused``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration / credentials
# ---------------------------------------------------------------------------

class ConfigurationError(IntelSearchError):
    """Raised when configuration is invalid or missing (e.g. no base URL)."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CredentialError(IntelSearchError):
    """Raised by credential providers that cannot produce request headers."""

    def __init__(
        self,
        message: str = "Failed to resolve request credentials",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------

class SearchTransportError(IntelSearchError):
    """Raised when the backend could not be reached (no response at all)."""

    def __init__(
        self,
        message: str = "Search backend is unreachable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SearchBackendError(IntelSearchError):
    """Raised when the backend answers with a non-2xx status.

    ``payload`` holds the parsed error body, or a placeholder dict when the
    body itself could not be read.
    """

    def __init__(
        self,
        message: str = "Search backend request failed",
        status: int = 500,
        payload: Any = None,
        provider_name: str | None = None,
    ) -> None:
        self._status = status
        self._payload = payload
        super().__init__(message=message, provider_name=provider_name)

    @property
    def status(self) -> int:
        return self._status

    @property
    def payload(self) -> Any:
        return self._payload


class ResponseParseError(IntelSearchError):
    """Raised when a 2xx response body is empty or not valid JSON."""

    def __init__(
        self,
        message: str = "Failed to parse response JSON",
        status: int | None = None,
        raw: str | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._status = status
        self._raw = raw
        super().__init__(message=message, provider_name=provider_name)

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def raw(self) -> str | None:
        return self._raw
