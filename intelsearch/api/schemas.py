"""Pydantic response schemas for the intelsearch API.

Search requests and responses reuse the domain models in
:mod:`intelsearch.models` directly; this module only adds the envelopes
for list endpoints, the health check, and error bodies.

Convention: response schemas end with "Response".
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from intelsearch.models.reviews import SavedSearchRecord, SearchHistoryEvent


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    provider: str
    mock_mode: bool
    fallback_enabled: bool


class SearchHistoryResponse(BaseModel):
    """Recent search events, newest first."""

    events: list[SearchHistoryEvent] = Field(default_factory=list)


class SavedSearchListResponse(BaseModel):
    items: list[SavedSearchRecord] = Field(default_factory=list)


class SaveSearchResponse(BaseModel):
    """Backend acknowledgement of a saved search; extra backend fields pass through."""

    model_config = ConfigDict(extra="allow")

    search_id: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
