"""Shared pytest fixtures for the intelsearch test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest

from intelsearch.config.settings import Settings
from intelsearch.models.reviews import HybridSearchSchema
from intelsearch.models.search import NormalizedResult

BASE_URL = "https://core.example"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 11, 20, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake backend, isolated from the real environment."""
    return Settings(
        _env_file=None,
        api_base_url=BASE_URL,
        api_key="test-key",
        bearer_token="",
        use_mock_data=False,
        enable_mock_fallback=True,
    )


@pytest.fixture
def default_schema() -> HybridSearchSchema:
    return HybridSearchSchema(
        indicator_types=["bank_account", "email"],
        datasets=["intake"],
        classifications=["romance_scam"],
        loss_buckets=["<1k"],
        time_presets=["7d"],
        entity_examples={"email": ["a@example.com"]},
    )


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an ``httpx.AsyncClient`` whose transport is the given handler."""

    def _factory(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory


def _make_result(**overrides: Any) -> NormalizedResult:
    fields: dict[str, Any] = {
        "id": "r-1",
        "title": "Title",
        "snippet": "Snippet",
        "source": "intake",
        "tags": [],
        "score": 0.5,
        "occurred_at": "2025-11-18T13:04:00.000Z",
    }
    fields.update(overrides)
    return NormalizedResult(**fields)


@pytest.fixture
def make_result() -> Callable[..., NormalizedResult]:
    """Build a NormalizedResult with sensible defaults."""
    return _make_result
