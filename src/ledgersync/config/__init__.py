"""Application configuration helpers."""

from __future__ import annotations

from .airtable import AirtableConfig, get_airtable_config
from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging, parse_log_level
from .storage import DatabaseConfig, get_database_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "AirtableConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "configure_logging",
    "get_airtable_config",
    "get_database_config",
    "get_sync_config",
    "parse_log_level",
    "require_env_vars",
]
