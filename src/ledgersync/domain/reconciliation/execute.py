"""Sequential, rate-limited application of write plans.

Each plan gets exactly one attempt per pass. A failing write is recorded and
the executor moves on; the next pass picks the record up again.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .plan import CreatePlan

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ledgersync.domain.model import FieldChanges
    from ledgersync.domain.ports import LedgerStore

    from .plan import PlanPurpose, WritePlan

DEFAULT_WRITE_DELAY_SECONDS = 0.25

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class WriteFailure:
    target: str
    changes: FieldChanges
    error: str

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.target,
            "fields": {key.value: value for key, value in self.changes.items()},
            "error": self.error,
        }


@dataclass(slots=True)
class ApplyOutcome:
    succeeded: list[str] = field(default_factory=list)
    failed: list[WriteFailure] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    applied: list[tuple[WritePlan, str]] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def succeeded_for(self, purpose: PlanPurpose) -> list[str]:
        """Record ids written by successful plans of ``purpose``."""

        return [record_id for plan, record_id in self.applied if plan.purpose is purpose]


class UpdateExecutor:
    """Apply plans one at a time with a fixed pause between writes."""

    def __init__(
        self,
        store: LedgerStore,
        *,
        delay_seconds: float = DEFAULT_WRITE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        self._store = store
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._writes = 0

    def apply(self, plans: Iterable[WritePlan]) -> ApplyOutcome:
        outcome = ApplyOutcome()
        for plan in plans:
            if plan.is_empty:
                log.debug("Skipping empty plan for %s", plan.target)
                continue
            self._pace()
            try:
                written = self._write(plan)
            except Exception as exc:
                log.exception("Write failed for %s (%s)", plan.target, plan.purpose)
                outcome.failed.append(
                    WriteFailure(target=plan.target, changes=dict(plan.changes), error=str(exc))
                )
                continue
            outcome.succeeded.append(written)
            outcome.applied.append((plan, written))
            if isinstance(plan, CreatePlan):
                outcome.created.append(written)
        log.info(
            "Applied %s plan(s): %s succeeded, %s failed",
            outcome.attempted,
            len(outcome.succeeded),
            len(outcome.failed),
        )
        return outcome

    def _pace(self) -> None:
        if self._writes and self._delay_seconds:
            self._sleep(self._delay_seconds)
        self._writes += 1

    def _write(self, plan: WritePlan) -> str:
        if isinstance(plan, CreatePlan):
            record = self._store.create(plan.changes)
            log.info("Created ledger record %s for source id=%s", record.record_id, plan.source_id)
            return record.record_id
        self._store.update(plan.record_id, plan.changes)
        log.info("Updated ledger record %s: %s", plan.record_id, sorted(plan.changes))
        return plan.record_id
