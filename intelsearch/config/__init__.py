"""Configuration module: exports Settings and load_config."""

from intelsearch.config.loader import load_config
from intelsearch.config.settings import Settings

__all__ = ["Settings", "load_config"]
