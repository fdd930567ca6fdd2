"""Synchronization defaults for reconciliation passes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import env_number, optional_env_var
from .errors import ConfigurationError

DEFAULT_WRITE_DELAY_MS = 250
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100
DEFAULT_REPORT_DIR = "reports"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    write_delay_ms: float = DEFAULT_WRITE_DELAY_MS
    page_size: int = DEFAULT_PAGE_SIZE
    report_dir: Path = Path(DEFAULT_REPORT_DIR)

    @property
    def write_delay_seconds(self) -> float:
        return self.write_delay_ms / 1000


def get_sync_config() -> SyncConfig:
    page_size = int(env_number("LEDGERSYNC_PAGE_SIZE", DEFAULT_PAGE_SIZE))
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ConfigurationError(f"LEDGERSYNC_PAGE_SIZE must be between 1 and {MAX_PAGE_SIZE}")
    return SyncConfig(
        write_delay_ms=env_number("AIRTABLE_RATE_LIMIT_DELAY", DEFAULT_WRITE_DELAY_MS),
        page_size=page_size,
        report_dir=Path(optional_env_var("REPORT_DIR", DEFAULT_REPORT_DIR)),
    )
