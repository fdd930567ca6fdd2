"""Airtable configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

AIRTABLE_BASE_URL = "https://api.airtable.com/v0/"
AIRTABLE_TIMEOUT_SECONDS = 30.0
DEFAULT_TABLE_NAME = "Employees"
DEFAULT_ROLES_TABLE_NAME = "Employee Roles"


@dataclass(frozen=True)
class AirtableConfig:
    """Holds Airtable API configuration values."""

    api_key: str
    base_id: str
    table_name: str
    resilience: ResilienceConfig
    roles_table_name: str = DEFAULT_ROLES_TABLE_NAME

    def table_for(self, profile: str) -> str:
        if profile == "role":
            return self.roles_table_name
        return self.table_name


def get_airtable_config(*, resilience: ResilienceConfig | None = None) -> AirtableConfig:
    values = require_env_vars(("AIRTABLE_API_KEY", "AIRTABLE_BASE_ID"))
    return AirtableConfig(
        api_key=values["AIRTABLE_API_KEY"],
        base_id=values["AIRTABLE_BASE_ID"],
        table_name=optional_env_var("AIRTABLE_TABLE_NAME", DEFAULT_TABLE_NAME),
        roles_table_name=optional_env_var("AIRTABLE_ROLES_TABLE_NAME", DEFAULT_ROLES_TABLE_NAME),
        resilience=resilience
        or ResilienceConfig(
            name="airtable",
            base_url=AIRTABLE_BASE_URL,
            timeout_seconds=AIRTABLE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        ),
    )
