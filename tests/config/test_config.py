from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ledgersync.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_airtable_config,
    get_database_config,
    get_sync_config,
    parse_log_level,
    require_env_vars,
)


def test_require_env_vars_reports_all_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRESENT", "value")
    monkeypatch.setenv("BLANK", "   ")

    with pytest.raises(MissingConfigurationError, match="ABSENT, BLANK"):
        require_env_vars(("PRESENT", "BLANK", "ABSENT"))


def test_airtable_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIRTABLE_API_KEY", "key")
    monkeypatch.setenv("AIRTABLE_BASE_ID", "appBase")

    config = get_airtable_config()

    assert config.table_name == "Employees"
    assert config.roles_table_name == "Employee Roles"
    assert config.table_for("role") == "Employee Roles"
    assert config.table_for("contact") == "Employees"
    assert config.resilience.base_url == "https://api.airtable.com/v0/"
    assert config.resilience.ratelimit is not None
    assert config.resilience.ratelimit.max_calls == 5
    assert config.resilience.retry.allowed_methods == frozenset({"GET", "HEAD"})


def test_airtable_config_requires_credentials() -> None:
    with pytest.raises(MissingConfigurationError, match="AIRTABLE_API_KEY"):
        get_airtable_config()


def test_database_config_falls_back_to_pg_connection_string(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PG_CONNECTION_STRING", "postgresql://db/hr")

    assert get_database_config().uri == "postgresql://db/hr"

    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_database_config_is_required() -> None:
    with pytest.raises(MissingConfigurationError, match="DATABASE_URI"):
        get_database_config()


def test_sync_config_defaults_and_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    defaults = get_sync_config()
    assert defaults.write_delay_seconds == 0.25
    assert defaults.page_size == 100
    assert defaults.report_dir == Path("reports")

    monkeypatch.setenv("AIRTABLE_RATE_LIMIT_DELAY", "500")
    monkeypatch.setenv("LEDGERSYNC_PAGE_SIZE", "20")
    monkeypatch.setenv("REPORT_DIR", "/tmp/ledger-reports")
    configured = get_sync_config()

    assert configured.write_delay_seconds == 0.5
    assert configured.page_size == 20
    assert configured.report_dir == Path("/tmp/ledger-reports")


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("AIRTABLE_RATE_LIMIT_DELAY", "soon"),
        ("AIRTABLE_RATE_LIMIT_DELAY", "-5"),
        ("LEDGERSYNC_PAGE_SIZE", "500"),
    ],
)
def test_sync_config_rejects_bad_values(
    monkeypatch: pytest.MonkeyPatch,
    name: str,
    value: str,
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_sync_config()


def test_parse_log_level() -> None:
    assert parse_log_level(None) == logging.INFO
    assert parse_log_level("debug") == logging.DEBUG
    with pytest.raises(ConfigurationError):
        parse_log_level("chatty")
