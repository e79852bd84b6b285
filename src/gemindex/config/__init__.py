"""Application configuration helpers."""

from __future__ import annotations

from .env import load_environment
from .errors import ConfigurationError
from .logging import configure_logging, resolve_log_level
from .storage import DatabaseConfig, default_data_dir, get_database_config, parse_database_uri

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "configure_logging",
    "default_data_dir",
    "get_database_config",
    "load_environment",
    "parse_database_uri",
    "resolve_log_level",
]
