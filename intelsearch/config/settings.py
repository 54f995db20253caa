"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Settings are read from (in priority order):
#
#   1. **Environment variables**, e.g. I4G_API_URL=https://api.example
#   2. **.env file**: key=value lines in the project root .env file
#
# Backend integration variables keep the console's historical names
# (I4G_API_URL, I4G_API_KEY, ...) via validation aliases; the remaining
# fields map to their upper-cased field name (APP_ENV, LOG_LEVEL, ...).
#
# An empty api_base_url means "backend not configured": the search service
# then answers from the synthetic dataset instead of failing.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """intelsearch application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === Backend ===
    api_base_url: str = Field(
        default="",
        validation_alias=AliasChoices("I4G_API_URL", "NEXT_PUBLIC_API_BASE_URL", "API_BASE_URL"),
    )
    # "core" talks to the hybrid search endpoint; anything else is treated
    # as a backend without hybrid search and always uses the mock provider.
    api_kind: str = Field(default="core", validation_alias=AliasChoices("I4G_API_KIND", "API_KIND"))
    search_path: str = "/reviews/search/query"
    search_timeout: float = 30.0

    # === Credentials (all optional, all merged into request headers) ===
    api_key: str = Field(default="", validation_alias=AliasChoices("I4G_API_KEY", "API_KEY"))
    bearer_token: str = Field(
        default="",
        validation_alias=AliasChoices("I4G_BEARER_TOKEN", "BEARER_TOKEN"),
    )
    iap_audience: str = Field(
        default="",
        validation_alias=AliasChoices("I4G_IAP_CLIENT_ID", "IAP_AUDIENCE"),
    )
    forwarded_identity_header: str = "X-Goog-Authenticated-User-Email"

    # === Degradation ===
    use_mock_data: bool = Field(
        default=False,
        validation_alias=AliasChoices("NEXT_PUBLIC_USE_MOCK_DATA", "USE_MOCK_DATA"),
    )
    enable_mock_fallback: bool = Field(
        default=True,
        validation_alias=AliasChoices("NEXT_PUBLIC_ENABLE_MOCK_FALLBACK", "ENABLE_MOCK_FALLBACK"),
    )

    # === Search defaults ===
    default_page_size: int = 10
    max_page_size: int = 100
    default_entity_type: str = "bank_account"
    schema_cache_ttl: int = 300

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def backend_configured(self) -> bool:
        """Return ``True`` when a live hybrid-search backend is configured."""
        return bool(self.api_base_url.strip()) and self.api_kind == "core"
