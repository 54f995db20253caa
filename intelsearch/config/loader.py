"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  : static defaults checked into the repo,
#                            including the hybrid-search schema snapshot
#   2. .env file           : local developer overrides (not committed)
#   3. Environment vars    : set at deploy time
#
# _deep_merge does recursive dict merging:
#   base = {"search": {"default_page_size": 10}}
#   overrides = {"search": {"backend_configured": True}}
#   result = {"search": {"default_page_size": 10, "backend_configured": True}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from intelsearch.config.settings import Settings

DEFAULT_CONFIG_PATH = "config/config.yaml"


def load_config(path: str = DEFAULT_CONFIG_PATH, settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings to derive overrides from; read from the
            environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "search": {
            "backend_configured": settings.backend_configured(),
            "use_mock_data": settings.use_mock_data,
            "enable_mock_fallback": settings.enable_mock_fallback,
            "default_page_size": settings.default_page_size,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
