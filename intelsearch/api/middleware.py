"""API middleware -- CORS, request logging, and error handling.

Starlette middleware runs last-added-first, so ``main`` adds
``ErrorHandlingMiddleware`` before ``RequestLoggingMiddleware``; the
logging middleware then sees the final status code after an application
error was turned into a JSON ``ErrorResponse``.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from intelsearch.api.schemas import ErrorResponse
from intelsearch.utils.errors import (
    IntelSearchError,
    SearchBackendError,
    SearchTransportError,
)
from intelsearch.utils.logging import bind_request_context, clear_request_context, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]`` for
        development; override with the console's origin in production.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration.

    Binds ``request_id`` (``X-Request-ID`` or a fresh one) and the forwarded
    analyst identity into the log context for the lifetime of the request.
    """

    def __init__(self, app: ASGIApp, identity_header: str = "X-Goog-Authenticated-User-Email") -> None:
        super().__init__(app)
        self._identity_header = identity_header

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        bind_request_context(
            request_id=request_id,
            actor=request.headers.get(self._identity_header),
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )
            clear_request_context()


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


def status_for_error(exc: IntelSearchError) -> int:
    """Map an application error to the HTTP status returned to the client.

    Backend 4xx rejections (e.g. an invalid saved search) keep their
    status; other upstream failures become 502; anything else is a 500.
    """
    if isinstance(exc, SearchBackendError):
        return exc.status if 400 <= exc.status < 500 else 502
    if isinstance(exc, SearchTransportError):
        return 502
    return 500


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``IntelSearchError`` subclasses and return structured JSON errors.

    Searches never reach this point in the default configuration (the
    search service degrades instead); it covers saved-search writes and
    strict mode.  Stack traces stay in the server log.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except IntelSearchError as exc:
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
            )
            return JSONResponse(
                status_code=status_for_error(exc),
                content=body.model_dump(),
            )
