"""Structured logging setup using structlog.

Dual renderer: one shared processor chain feeds either a coloured
``ConsoleRenderer`` (development) or a ``JSONRenderer`` (``APP_ENV=production``
or ``json_output=True``).  Standard-library loggers (httpx, uvicorn) are
routed through the same chain via ``ProcessorFormatter``.

Two search-specific processors sit in the shared chain:

- request-scoped context (``request_id``, ``actor``) bound by the API
  middleware with :func:`bind_request_context` is merged into every event;
- credential values (API keys, bearer tokens) are masked before rendering,
  since backend headers are logged when a call fails.

Output goes to stderr so ``--json`` CLI output on stdout stays parseable.
"""

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

_SECRET_KEYS = frozenset({"authorization", "x-api-key", "api_key", "bearer_token", "token"})
_MASK = "***"


def mask_credentials(
    _logger: Any,
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """structlog processor: mask credential values, including inside header dicts."""
    for key, value in list(event_dict.items()):
        if key.lower() in _SECRET_KEYS and value:
            event_dict[key] = _MASK
        elif isinstance(value, dict):
            event_dict[key] = {
                k: (_MASK if isinstance(k, str) and k.lower() in _SECRET_KEYS and v else v)
                for k, v in value.items()
            }
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the stdlib bridge.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR.
        json_output: Force JSON rendering regardless of ``APP_ENV``.

    Returns:
        A configured structlog BoundLogger.
    """
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_credentials,
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    return structlog.get_logger()


def bind_request_context(request_id: str | None = None, actor: str | None = None) -> None:
    """Bind per-request identifiers into contextvars for subsequent log events.

    Only the given keys are bound; call :func:`clear_request_context` when
    the request is finished.
    """
    payload = {
        key: value
        for key, value in (("request_id", request_id), ("actor", actor))
        if value
    }
    if payload:
        bind_contextvars(**payload)


def clear_request_context() -> None:
    clear_contextvars()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to *name*, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
