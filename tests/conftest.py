from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from tests.support.ledger import InMemoryLedgerStore, InMemorySourceStore

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def ledger_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def source_store() -> InMemorySourceStore:
    return InMemorySourceStore()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "AIRTABLE_API_KEY",
        "AIRTABLE_BASE_ID",
        "AIRTABLE_TABLE_NAME",
        "AIRTABLE_ROLES_TABLE_NAME",
        "AIRTABLE_RATE_LIMIT_DELAY",
        "DATABASE_URI",
        "PG_CONNECTION_STRING",
        "LEDGERSYNC_PAGE_SIZE",
        "REPORT_DIR",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
