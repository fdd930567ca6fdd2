"""Reconciliation driver: one end-to-end pass as an explicit state machine.

Responsibilities of this stage:
- load the source rows and the full ledger before anything else happens
- collapse, validate and resolve source rows against a fresh ledger index
- diff matched pairs, drop no-op plans and plan creates for unknown people
- optionally run the duplicate side pass
- hand every plan to the update executor and assemble the report

Out of scope for this stage:
- retries (a failed write is picked up by the next pass)
- locking against concurrent passes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from ledgersync.domain.model import LedgerField, MatchKeyKind
from ledgersync.domain.ports import SourceFilter

from .canonical import canonical_entities
from .deduplicate import detect_duplicates, duplicate_mark_plans
from .diff import build_create_plan, compute_diff
from .errors import IllegalTransitionError, LoadFailure
from .execute import DEFAULT_WRITE_DELAY_SECONDS, UpdateExecutor
from .keys import LedgerIndex
from .plan import PlanPurpose
from .report import AmbiguousMatch, PassReport, ValidationIssue
from .resolve import resolve
from .validation import validate_changes, validate_source_entity

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ledgersync.domain.model import LedgerRecord, SourceEntity
    from ledgersync.domain.ports import LedgerStore, SourceStore

    from .plan import WritePlan
    from .profiles import SyncProfile

log = logging.getLogger(__name__)

DUPLICATE_SCAN_FIELDS: tuple[LedgerField, ...] = (
    LedgerField.NAME,
    LedgerField.EMAIL,
    LedgerField.PHONE,
    LedgerField.LISTED_STATUS,
    LedgerField.POTENTIAL_DUPLICATE,
)


class PassState(StrEnum):
    INIT = "init"
    SOURCE_LOADED = "source_loaded"
    LEDGER_LOADED = "ledger_loaded"
    RESOLVED = "resolved"
    DIFFED = "diffed"
    APPLIED = "applied"
    REPORTED = "reported"
    FAILED = "failed"


_TRANSITIONS: dict[PassState, frozenset[PassState]] = {
    PassState.INIT: frozenset({PassState.SOURCE_LOADED}),
    PassState.SOURCE_LOADED: frozenset({PassState.LEDGER_LOADED}),
    PassState.LEDGER_LOADED: frozenset({PassState.RESOLVED}),
    PassState.RESOLVED: frozenset({PassState.DIFFED}),
    PassState.DIFFED: frozenset({PassState.APPLIED}),
    PassState.APPLIED: frozenset({PassState.REPORTED}),
    PassState.REPORTED: frozenset(),
    PassState.FAILED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationConfig:
    """Everything a pass needs besides its two stores."""

    profile: SyncProfile
    write_delay_seconds: float = DEFAULT_WRITE_DELAY_SECONDS
    dry_run: bool = False
    detect_duplicates: bool = False
    create_missing: bool | None = None

    def __post_init__(self) -> None:
        if self.detect_duplicates and not self.profile.supports_duplicates:
            raise ValueError(f"Profile {self.profile.name!r} does not support duplicate detection")

    @property
    def allow_create(self) -> bool:
        if self.create_missing is None:
            return self.profile.create_missing
        return self.create_missing and self.profile.create_missing


@dataclass(slots=True)
class _Resolution:
    matches: list[tuple[SourceEntity, LedgerRecord]]
    unmatched: list[SourceEntity]


class ReconciliationDriver:
    """Run exactly one reconciliation pass for one profile."""

    def __init__(
        self,
        source_store: SourceStore,
        ledger_store: LedgerStore,
        config: ReconciliationConfig,
        *,
        executor: UpdateExecutor | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._source_store = source_store
        self._ledger_store = ledger_store
        self._config = config
        self._executor = executor or UpdateExecutor(
            ledger_store, delay_seconds=config.write_delay_seconds
        )
        self._clock = clock
        self._state = PassState.INIT
        self.report = PassReport(profile=config.profile.name, dry_run=config.dry_run)

    @property
    def state(self) -> PassState:
        return self._state

    def run(self) -> PassReport:
        """Execute the pass; raises :class:`LoadFailure` when a full read fails."""

        if self._state is not PassState.INIT:
            raise IllegalTransitionError(self._state, PassState.SOURCE_LOADED)
        profile = self._config.profile
        self.report.started_at = self._clock()
        log.info("Starting %s pass (dry_run=%s)", profile.name, self._config.dry_run)

        entities = self._load_source(profile)
        records = self._load_ledger(profile)

        resolution = self._resolve(entities, records)
        self._transition(PassState.RESOLVED)

        plans = self._plan(resolution)
        plans.extend(self._plan_duplicates(records))
        self._transition(PassState.DIFFED)

        self._apply(plans)
        self._transition(PassState.APPLIED)

        self.report.finished_at = self._clock()
        self._transition(PassState.REPORTED)
        log.info("Finished pass: %s", self.report.summary())
        return self.report

    def _transition(self, target: PassState) -> None:
        if target is not PassState.FAILED and target not in _TRANSITIONS[self._state]:
            raise IllegalTransitionError(self._state, target)
        log.debug("Pass state %s -> %s", self._state, target)
        self._state = target
        self.report.state = target.value

    def _fail(self, store: str, exc: Exception) -> LoadFailure:
        self._transition(PassState.FAILED)
        self.report.finished_at = self._clock()
        log.error("Aborting %s pass: could not load %s", self._config.profile.name, store)
        return LoadFailure(store, exc)

    def _load_source(self, profile: SyncProfile) -> list[SourceEntity]:
        source_filter = SourceFilter(profile=profile.name, active_only=profile.active_only)
        try:
            entities = list(self._source_store.fetch_entities(source_filter))
        except Exception as exc:
            raise self._fail("source store", exc) from exc
        self.report.source_rows = len(entities)
        self._transition(PassState.SOURCE_LOADED)
        log.info("Loaded %s source row(s)", len(entities))
        return entities

    def _ledger_fields(self, profile: SyncProfile) -> tuple[LedgerField, ...]:
        fields = profile.ledger_fields()
        if self._config.detect_duplicates:
            fields = tuple(dict.fromkeys((*fields, *DUPLICATE_SCAN_FIELDS)))
        return fields

    def _load_ledger(self, profile: SyncProfile) -> list[LedgerRecord]:
        try:
            records = list(self._ledger_store.fetch_all(self._ledger_fields(profile)))
        except Exception as exc:
            raise self._fail("ledger", exc) from exc
        self.report.ledger_rows = len(records)
        self._transition(PassState.LEDGER_LOADED)
        log.info("Loaded %s ledger record(s)", len(records))
        return records

    def _resolve(
        self, entities: Sequence[SourceEntity], records: Sequence[LedgerRecord]
    ) -> _Resolution:
        profile = self._config.profile
        canonical = canonical_entities(entities, key_kinds=profile.grouping_keys)
        self.report.canonical_entities = len(canonical)
        canonical = [entity for entity in canonical if self._valid_source(entity)]

        index = LedgerIndex.build(records)
        for value, colliding in index.collisions(MatchKeyKind.EMPLOYEE_ID).items():
            record_ids = tuple(record.record_id for record in colliding)
            log.warning("Employee id %s is held by ledger records %s", value, record_ids)
            self.report.ambiguous.append(
                AmbiguousMatch(
                    source_id=value,
                    record_ids=record_ids,
                    key=f"{MatchKeyKind.EMPLOYEE_ID.value}:{value}",
                    reason="several ledger records hold this employee id",
                )
            )

        resolution = _Resolution(matches=[], unmatched=[])
        claimed: dict[str, str] = {}
        for entity in canonical:
            result = resolve(entity, index, key_kinds=profile.match_keys)
            if result.record is None or result.key is None:
                resolution.unmatched.append(entity)
                continue
            record = result.record
            if result.ambiguous:
                self.report.ambiguous.append(
                    AmbiguousMatch(
                        source_id=entity.id,
                        record_ids=tuple(candidate.record_id for candidate in result.candidates),
                        key=str(result.key),
                        reason="several ledger candidates; first in fetch order used",
                    )
                )
            owner = claimed.get(record.record_id)
            if owner is not None:
                log.warning(
                    "Ledger record %s already claimed by source id=%s; skipping id=%s",
                    record.record_id,
                    owner,
                    entity.id,
                )
                self.report.ambiguous.append(
                    AmbiguousMatch(
                        source_id=entity.id,
                        record_ids=(record.record_id,),
                        key=str(result.key),
                        reason=f"ledger record already claimed by source id {owner}",
                    )
                )
                continue
            claimed[record.record_id] = entity.id
            self.report.matched_by_kind[result.key.kind] += 1
            log.debug("Matched source id=%s to %s via %s", entity.id, record.record_id, result.key)
            resolution.matches.append((entity, record))

        self.report.unmatched = len(resolution.unmatched)
        return resolution

    def _valid_source(self, entity: SourceEntity) -> bool:
        """Validate a canonical row; an invalid one skips its whole identity."""

        errors = validate_source_entity(entity)
        if not errors:
            return True
        log.warning("Skipping invalid source row id=%s: %s", entity.id, "; ".join(errors))
        self.report.validation_failures.append(
            ValidationIssue(subject=f"source:{entity.id}", stage="source", errors=tuple(errors))
        )
        return False

    def _plan(self, resolution: _Resolution) -> list[WritePlan]:
        profile = self._config.profile
        plans: list[WritePlan] = []
        for entity, record in resolution.matches:
            plan = compute_diff(entity, record, profile)
            if plan.is_empty:
                continue
            if self._accept(plan):
                plans.append(plan)
                self.report.plans_generated += 1

        if not self._config.allow_create:
            return plans
        for entity in resolution.unmatched:
            if not entity.active:
                log.debug("Not creating a ledger record for inactive source id=%s", entity.id)
                continue
            create = build_create_plan(entity, profile)
            if self._accept(create):
                plans.append(create)
                self.report.creates_generated += 1
        return plans

    def _accept(self, plan: WritePlan) -> bool:
        errors = validate_changes(plan.changes)
        if not errors:
            return True
        log.warning("Skipping invalid %s plan for %s: %s", plan.purpose, plan.target, errors)
        self.report.validation_failures.append(
            ValidationIssue(subject=plan.target, stage="plan", errors=tuple(errors))
        )
        return False

    def _plan_duplicates(self, records: Sequence[LedgerRecord]) -> list[WritePlan]:
        if not self._config.detect_duplicates:
            return []
        groups = detect_duplicates(records)
        marks = duplicate_mark_plans(groups)
        self.report.duplicate_groups = len(groups)
        log.info("Found %s duplicate group(s); %s record(s) to flag", len(groups), len(marks))
        return list(marks)

    def _apply(self, plans: list[WritePlan]) -> None:
        if self._config.dry_run:
            log.info("Dry run: %s plan(s) computed, none written", len(plans))
            return
        outcome = self._executor.apply(plans)
        self.report.attempted = outcome.attempted
        self.report.succeeded = len(outcome.succeeded)
        self.report.created = len(outcome.created)
        self.report.failures = list(outcome.failed)
        self.report.duplicates_flagged = len(outcome.succeeded_for(PlanPurpose.MARK_DUPLICATE))


def scan_duplicates(
    ledger_store: LedgerStore,
    *,
    dry_run: bool = False,
    write_delay_seconds: float = DEFAULT_WRITE_DELAY_SECONDS,
    executor: UpdateExecutor | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> PassReport:
    """Standalone duplicate pass over the ledger; no source rows involved."""

    report = PassReport(profile="duplicates", dry_run=dry_run, started_at=clock())
    try:
        records = list(ledger_store.fetch_all(DUPLICATE_SCAN_FIELDS))
    except Exception as exc:
        report.state = PassState.FAILED.value
        log.error("Aborting duplicate scan: could not load ledger")
        raise LoadFailure("ledger", exc) from exc
    report.ledger_rows = len(records)

    groups = detect_duplicates(records)
    marks = duplicate_mark_plans(groups)
    report.duplicate_groups = len(groups)
    log.info("Found %s duplicate group(s); %s record(s) to flag", len(groups), len(marks))

    if dry_run:
        log.info("Dry run: %s record(s) would be flagged", len(marks))
    else:
        active_executor = executor or UpdateExecutor(
            ledger_store, delay_seconds=write_delay_seconds
        )
        outcome = active_executor.apply(marks)
        report.attempted = outcome.attempted
        report.succeeded = len(outcome.succeeded)
        report.duplicates_flagged = len(outcome.succeeded_for(PlanPurpose.MARK_DUPLICATE))
        report.failures = list(outcome.failed)

    report.state = PassState.REPORTED.value
    report.finished_at = clock()
    log.info("Finished duplicate scan: %s", report.summary())
    return report
