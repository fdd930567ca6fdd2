from __future__ import annotations

import argparse
import logging
import os
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ledgersync.app import run_duplicate_scan, run_reconciliation
from ledgersync.config import ConfigurationError, configure_logging, parse_log_level
from ledgersync.domain.reconciliation import PROFILES

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile employee records into the ledger")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Run one reconciliation pass")
    sync.add_argument(
        "--profile",
        choices=sorted(PROFILES),
        required=True,
        help="Which tracked-field set to reconcile",
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and report plans without writing to the ledger",
    )
    sync.add_argument(
        "--no-create",
        action="store_true",
        help="Never create ledger records for unmatched source rows",
    )
    sync.add_argument(
        "--flag-duplicates",
        action="store_true",
        help="Also run the duplicate detector and flag colliding ledger records",
    )

    duplicates = subparsers.add_parser("duplicates", help="Flag duplicate ledger records")
    duplicates.add_argument(
        "--dry-run",
        action="store_true",
        help="Report duplicate groups without flagging anything",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging(level=parse_log_level(os.getenv("LOG_LEVEL")))
        parsed_args = _parse_args(args_list)
    except ConfigurationError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sync":
            report = run_reconciliation(
                parsed_args.profile,
                dry_run=parsed_args.dry_run,
                create_missing=False if parsed_args.no_create else None,
                detect_duplicates=parsed_args.flag_duplicates,
            )
        elif parsed_args.command == "duplicates":
            report = run_duplicate_scan(dry_run=parsed_args.dry_run)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    log.info("Pass complete: %s", report.summary())


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
