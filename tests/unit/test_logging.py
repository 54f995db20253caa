"""Unit tests for the logging helpers."""

from __future__ import annotations

from structlog.contextvars import get_contextvars

from intelsearch.utils.logging import (
    bind_request_context,
    clear_request_context,
    mask_credentials,
)


class TestMaskCredentials:
    def test_top_level_secrets_are_masked(self) -> None:
        event = mask_credentials(None, "info", {"event": "x", "api_key": "k", "query": "q"})
        assert event == {"event": "x", "api_key": "***", "query": "q"}

    def test_header_dicts_are_masked(self) -> None:
        event = mask_credentials(
            None,
            "info",
            {"headers": {"Authorization": "Bearer t", "X-API-KEY": "k", "Accept": "json"}},
        )
        assert event["headers"] == {
            "Authorization": "***",
            "X-API-KEY": "***",
            "Accept": "json",
        }

    def test_empty_values_are_left_alone(self) -> None:
        event = mask_credentials(None, "info", {"bearer_token": ""})
        assert event["bearer_token"] == ""


class TestRequestContext:
    def test_bind_and_clear(self) -> None:
        clear_request_context()
        bind_request_context(request_id="req-1", actor="analyst@example.com")

        assert get_contextvars() == {"request_id": "req-1", "actor": "analyst@example.com"}

        clear_request_context()
        assert get_contextvars() == {}

    def test_missing_values_are_not_bound(self) -> None:
        clear_request_context()
        bind_request_context(request_id="req-2", actor=None)

        assert get_contextvars() == {"request_id": "req-2"}
        clear_request_context()
