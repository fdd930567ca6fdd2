"""JSON report files, one per profile, replaced on every pass."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgersync.domain.reconciliation import PassReport

log = logging.getLogger(__name__)


def report_path(directory: Path | str, profile: str) -> Path:
    return Path(directory) / f"{profile}_report.json"


def write_report(report: PassReport, directory: Path | str) -> Path:
    """Write ``report`` as pretty-printed JSON and return the file path."""

    path = report_path(directory, report.profile)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".json.tmp")
    with tmp_path.open("w", encoding="utf-8") as handle:
        json.dump(report.to_dict(), handle, indent=2, default=str)
        handle.write("\n")
    tmp_path.replace(path)
    log.info("Wrote %s report to %s", report.profile, path)
    return path
