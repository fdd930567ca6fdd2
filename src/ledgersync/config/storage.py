"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import MissingConfigurationError


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_database_config() -> DatabaseConfig:
    for name in ("DATABASE_URI", "PG_CONNECTION_STRING"):
        value = os.getenv(name)
        if value and value.strip():
            return DatabaseConfig(uri=value.strip())
    raise MissingConfigurationError(
        "Missing configuration for: DATABASE_URI (or PG_CONNECTION_STRING)"
    )
