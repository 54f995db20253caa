"""intelsearch API layer -- routes, schemas, and middleware."""

from intelsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from intelsearch.api.routes import router
from intelsearch.api.schemas import (
    ErrorResponse,
    HealthResponse,
    SavedSearchListResponse,
    SaveSearchResponse,
    SearchHistoryResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ErrorResponse",
    "HealthResponse",
    "SavedSearchListResponse",
    "SaveSearchResponse",
    "SearchHistoryResponse",
]
