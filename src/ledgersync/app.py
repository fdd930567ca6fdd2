"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine

from ledgersync.adapters.airtable import AirtableLedgerStore, schema_for
from ledgersync.adapters.reports import write_report
from ledgersync.adapters.sqlalchemy import SqlAlchemySourceStore
from ledgersync.config import get_airtable_config, get_database_config, get_sync_config
from ledgersync.domain.reconciliation import (
    ReconciliationConfig,
    ReconciliationDriver,
    get_profile,
    scan_duplicates,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from ledgersync.config import AirtableConfig, DatabaseConfig, SyncConfig
    from ledgersync.domain.ports import LedgerStore, SourceStore
    from ledgersync.domain.reconciliation import PassReport

log = getLogger(__name__)

DUPLICATE_SCAN_PROFILE = "duplicates"


def build_engine(database: DatabaseConfig | None = None) -> Engine:
    config = database or get_database_config()
    return create_engine(config.uri, future=True, pool_pre_ping=True)


def build_ledger_store(
    profile_name: str,
    *,
    airtable: AirtableConfig | None = None,
    sync: SyncConfig | None = None,
) -> AirtableLedgerStore:
    airtable_config = airtable or get_airtable_config()
    sync_config = sync or get_sync_config()
    return AirtableLedgerStore(
        config=airtable_config,
        table_name=airtable_config.table_for(profile_name),
        schema=schema_for(profile_name),
        page_size=sync_config.page_size,
    )


def run_reconciliation(
    profile_name: str,
    *,
    source_store: SourceStore | None = None,
    ledger_store: LedgerStore | None = None,
    sync: SyncConfig | None = None,
    dry_run: bool = False,
    create_missing: bool | None = None,
    detect_duplicates: bool = False,
    write_report_file: bool = True,
) -> PassReport:
    """Run one reconciliation pass for ``profile_name`` using the configured adapters."""

    profile = get_profile(profile_name)
    sync_config = sync or get_sync_config()
    effective_ledger = ledger_store or build_ledger_store(profile.name, sync=sync_config)

    engine: Engine | None = None
    if source_store is None:
        engine = build_engine()
        source_store = SqlAlchemySourceStore(engine=engine)

    config = ReconciliationConfig(
        profile=profile,
        write_delay_seconds=sync_config.write_delay_seconds,
        dry_run=dry_run,
        detect_duplicates=detect_duplicates,
        create_missing=create_missing,
    )
    log.info(
        "Starting %s sync: dry_run=%s, create_missing=%s, detect_duplicates=%s",
        profile.name,
        dry_run,
        config.allow_create,
        detect_duplicates,
    )
    try:
        report = ReconciliationDriver(source_store, effective_ledger, config).run()
    finally:
        if engine is not None:
            engine.dispose()

    if write_report_file:
        write_report(report, sync_config.report_dir)
    if report.failed:
        log.warning("%s write(s) failed; they will be retried on the next pass", report.failed)
    return report


def run_duplicate_scan(
    *,
    ledger_store: LedgerStore | None = None,
    sync: SyncConfig | None = None,
    dry_run: bool = False,
    write_report_file: bool = True,
) -> PassReport:
    """Flag duplicate ledger records without consulting the system of record."""

    sync_config = sync or get_sync_config()
    effective_ledger = ledger_store or build_ledger_store(DUPLICATE_SCAN_PROFILE, sync=sync_config)
    report = scan_duplicates(
        effective_ledger,
        dry_run=dry_run,
        write_delay_seconds=sync_config.write_delay_seconds,
    )
    if write_report_file:
        write_report(report, sync_config.report_dir)
    return report
