"""Per-pass report: the only durable output of a reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ledgersync.domain.model import MatchKeyKind

if TYPE_CHECKING:
    from datetime import datetime

    from .execute import WriteFailure


@dataclass(frozen=True, slots=True, kw_only=True)
class AmbiguousMatch:
    """Something an operator should disambiguate by hand."""

    source_id: str | None
    record_ids: tuple[str, ...]
    key: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {
            "source_id": self.source_id,
            "record_ids": list(self.record_ids),
            "key": self.key,
            "reason": self.reason,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationIssue:
    subject: str
    stage: str
    errors: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {"subject": self.subject, "stage": self.stage, "errors": list(self.errors)}


def _empty_match_counts() -> dict[MatchKeyKind, int]:
    return dict.fromkeys(MatchKeyKind, 0)


@dataclass(slots=True, kw_only=True)
class PassReport:
    profile: str
    state: str = "init"
    dry_run: bool = False
    started_at: datetime | None = None
    finished_at: datetime | None = None
    source_rows: int = 0
    canonical_entities: int = 0
    ledger_rows: int = 0
    matched_by_kind: dict[MatchKeyKind, int] = field(default_factory=_empty_match_counts)
    unmatched: int = 0
    ambiguous: list[AmbiguousMatch] = field(default_factory=list)
    validation_failures: list[ValidationIssue] = field(default_factory=list)
    plans_generated: int = 0
    creates_generated: int = 0
    attempted: int = 0
    succeeded: int = 0
    created: int = 0
    failures: list[WriteFailure] = field(default_factory=list)
    duplicate_groups: int = 0
    duplicates_flagged: int = 0

    @property
    def matched(self) -> int:
        return sum(self.matched_by_kind.values())

    @property
    def failed(self) -> int:
        return len(self.failures)

    def summary(self) -> str:
        return (
            f"profile={self.profile} source={self.source_rows} "
            f"canonical={self.canonical_entities} ledger={self.ledger_rows} "
            f"matched={self.matched} unmatched={self.unmatched} "
            f"plans={self.plans_generated} creates={self.creates_generated} "
            f"succeeded={self.succeeded} failed={self.failed} "
            f"duplicates={self.duplicates_flagged}/{self.duplicate_groups} "
            f"ambiguous={len(self.ambiguous)} invalid={len(self.validation_failures)}"
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "profile": self.profile,
            "state": self.state,
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "source_rows": self.source_rows,
            "canonical_entities": self.canonical_entities,
            "ledger_rows": self.ledger_rows,
            "matched": self.matched,
            "matched_by_kind": {kind.value: count for kind, count in self.matched_by_kind.items()},
            "unmatched": self.unmatched,
            "plans_generated": self.plans_generated,
            "creates_generated": self.creates_generated,
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "created": self.created,
            "failed": self.failed,
            "failures": [failure.to_dict() for failure in self.failures],
            "duplicate_groups": self.duplicate_groups,
            "duplicates_flagged": self.duplicates_flagged,
            "ambiguous": [item.to_dict() for item in self.ambiguous],
            "validation_failures": [issue.to_dict() for issue in self.validation_failures],
        }
