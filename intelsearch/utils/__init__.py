"""Utility modules for intelsearch.

- **errors** -- Exception hierarchy rooted at IntelSearchError; the search
  service turns every subclass into a degraded (synthetic) response.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **payloads** -- Total coercion helpers for schemaless backend JSON.
- **time_ranges** (not re-exported here) -- ISO-8601 parsing and the
  ``7d`` / ``24h`` time-preset resolver.
"""

# -- Domain exception hierarchy --------------------------------------------
from intelsearch.utils.errors import (
    ConfigurationError,
    CredentialError,
    IntelSearchError,
    ResponseParseError,
    SearchBackendError,
    SearchTransportError,
)

# -- Structured logging setup ----------------------------------------------
from intelsearch.utils.logging import configure_logging, get_logger

# -- Payload coercion -------------------------------------------------------
from intelsearch.utils.payloads import as_object, to_finite_number, to_string_array

__all__ = [
    "ConfigurationError",
    "CredentialError",
    "IntelSearchError",
    "ResponseParseError",
    "SearchBackendError",
    "SearchTransportError",
    "as_object",
    "configure_logging",
    "get_logger",
    "to_finite_number",
    "to_string_array",
]
