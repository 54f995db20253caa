"""intelsearch FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.

Also exposes :func:`build_search_service` for CLI or scripting usage
outside the web server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from intelsearch import __version__
from intelsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from intelsearch.api.routes import router as api_router
from intelsearch.config.loader import load_config
from intelsearch.config.settings import Settings
from intelsearch.interfaces.search_provider import ISearchProvider
from intelsearch.models.reviews import HybridSearchSchema
from intelsearch.providers.auth.header_credential_provider import HeaderCredentialProvider
from intelsearch.providers.cache.memory_cache import MemoryCacheProvider
from intelsearch.providers.search.core_search_provider import CoreSearchProvider
from intelsearch.providers.search.mock_search_provider import MockSearchProvider
from intelsearch.services.reviews_mapping import map_hybrid_search_schema
from intelsearch.services.reviews_service import ReviewsService
from intelsearch.services.search_service import SearchService
from intelsearch.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Search provider selection
# ---------------------------------------------------------------------------


def build_search_service(
    app_settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> SearchService:
    """Select the search provider from settings and wrap it with the fallback.

    The synthetic provider answers directly when mock data is forced or no
    hybrid-search backend is configured; otherwise the live backend is tried
    first.
    """
    fallback = MockSearchProvider()
    if app_settings.use_mock_data or not app_settings.backend_configured():
        _logger.info(
            "search_provider_selected",
            provider=fallback.get_provider_name(),
            forced=app_settings.use_mock_data,
        )
        return SearchService(primary=fallback, fallback=fallback)

    primary: ISearchProvider = CoreSearchProvider(
        http_client=http_client or httpx.AsyncClient(timeout=app_settings.search_timeout),
        base_url=app_settings.api_base_url,
        credentials=HeaderCredentialProvider.from_settings(app_settings),
        search_path=app_settings.search_path,
    )
    _logger.info(
        "search_provider_selected",
        provider=primary.get_provider_name(),
        fallback_enabled=app_settings.enable_mock_fallback,
    )
    return SearchService(
        primary=primary,
        fallback=fallback,
        enable_fallback=app_settings.enable_mock_fallback,
    )


def build_default_schema(app_config: dict[str, Any]) -> HybridSearchSchema:
    """Return the YAML schema snapshot as a :class:`HybridSearchSchema`."""
    snapshot = app_config.get("hybrid_search_schema")
    return map_hybrid_search_schema(snapshot if isinstance(snapshot, dict) else {})


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, config_path: Path = _CONFIG_PATH) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_config = load_config(str(config_path), settings=app_settings)

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.search_timeout)
    cache = MemoryCacheProvider(
        ttl=app_settings.schema_cache_ttl,
        namespace=app_settings.api_base_url or "mock",
    )

    search_service = build_search_service(app_settings, http_client=http_client)
    reviews_service = ReviewsService(
        http_client=http_client,
        base_url="" if app_settings.use_mock_data else app_settings.api_base_url,
        default_schema=build_default_schema(app_config),
        cache=cache,
        credentials=HeaderCredentialProvider.from_settings(app_settings),
    )

    return {
        "http_client": http_client,
        "config": app_config,
        "search_service": search_service,
        "reviews_service": reviews_service,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise providers and services on startup, clean up on shutdown."""
    app_settings: Settings = application.state.settings
    components = _build_all(app_settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=__version__,
        environment=app_settings.app_env,
        search_provider=components["search_service"].provider_name,
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="intelsearch API",
        version=__version__,
        description=(
            "Hybrid search for the analyst console: builds structured + vector "
            "queries from filter state, normalizes results into uniform cards "
            "with facets, and degrades to synthetic data when the backend fails."
        ),
        lifespan=_lifespan,
    )
    app_settings = app_settings or settings
    application.state.settings = app_settings

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(
        RequestLoggingMiddleware,
        identity_header=app_settings.forwarded_identity_header,
    )
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "intelsearch.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    run()
