"""Duplicate detection over the ledger alone.

Responsibilities of this stage:
- bucket unflagged ledger records by normalized email, phone and name
- merge records sharing any key into one :class:`DuplicateGroup`
- choose one survivor per group and queue the rest for flagging

Out of scope for this stage:
- identity-field collisions (the driver reports those as broken matching)
- ever clearing an existing duplicate flag
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ledgersync.domain.model import LedgerField, MatchKeyKind

from .canonical import pick_preferred
from .keys import connected_groups, keys_for_record
from .plan import PlanPurpose, UpdatePlan

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from ledgersync.domain.model import LedgerRecord

    from .keys import IdentityKey

DUPLICATE_KEY_KINDS: tuple[MatchKeyKind, ...] = (
    MatchKeyKind.EMAIL,
    MatchKeyKind.PHONE,
    MatchKeyKind.NAME,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class DuplicateGroup:
    """Records linked through shared keys, with exactly one survivor."""

    keys: tuple[IdentityKey, ...]
    survivor: LedgerRecord
    duplicates: tuple[LedgerRecord, ...]

    @property
    def members(self) -> tuple[LedgerRecord, ...]:
        return (self.survivor, *self.duplicates)


def _record_timestamp(record: LedgerRecord) -> datetime | None:
    return record.updated_at or record.created_at


def select_survivor(members: Sequence[LedgerRecord]) -> LedgerRecord:
    return pick_preferred(
        members,
        is_active=lambda record: record.is_active,
        timestamp=_record_timestamp,
    )


def detect_duplicates(
    records: Iterable[LedgerRecord],
    *,
    key_kinds: Sequence[MatchKeyKind] = DUPLICATE_KEY_KINDS,
) -> list[DuplicateGroup]:
    """Group colliding ledger records; already-flagged records are ignored.

    Records sharing any key are merged transitively, so a record belongs to
    at most one group and each group keeps a single unflagged survivor.
    """

    candidates = [record for record in records if not record.is_flagged_duplicate]
    linked = connected_groups(candidates, lambda record: keys_for_record(record, key_kinds))

    groups: list[DuplicateGroup] = []
    for members, keys in linked:
        if len(members) < 2:
            continue
        survivor = select_survivor(members)
        duplicates = tuple(member for member in members if member is not survivor)
        log.debug(
            "Duplicate group on %s: survivor=%s duplicates=%s",
            ", ".join(str(key) for key in keys),
            survivor.record_id,
            [member.record_id for member in duplicates],
        )
        groups.append(DuplicateGroup(keys=keys, survivor=survivor, duplicates=duplicates))
    return groups


def duplicate_mark_plans(groups: Iterable[DuplicateGroup]) -> list[UpdatePlan]:
    """One "mark as duplicate" plan per non-survivor record."""

    plans: list[UpdatePlan] = []
    for group in groups:
        shared = ", ".join(str(key) for key in group.keys)
        plans.extend(
            UpdatePlan(
                record_id=record.record_id,
                changes={LedgerField.POTENTIAL_DUPLICATE: True},
                purpose=PlanPurpose.MARK_DUPLICATE,
                reason=f"duplicate of {group.survivor.record_id} on {shared}",
            )
            for record in group.duplicates
        )
    return plans
