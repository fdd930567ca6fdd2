"""Field-level diff between a canonical source entity and its ledger record.

Responsibilities of this stage:
- compare canonical forms of every tracked field (source wins)
- emit an explicit ``None`` when a blank source value must clear the ledger
- always recompute both status fields from the active flag
- heal the identity link when the match came through a non-identity key

Out of scope for this stage:
- filtering empty plans (the driver does that, so this function stays total)
- validation and writing
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledgersync.domain.model import LedgerField

from .normalize import (
    normalize_date,
    normalize_email,
    normalize_phone,
    normalize_region,
    normalize_status,
    normalize_text,
)
from .plan import CreatePlan, PlanPurpose, UpdatePlan

if TYPE_CHECKING:
    from ledgersync.domain.model import FieldChanges, LedgerRecord, LedgerValue, SourceEntity

    from .profiles import SyncProfile


def _has_value(raw: LedgerValue) -> bool:
    if isinstance(raw, str):
        return bool(raw.strip())
    return raw is not None


def _status_values(source: SourceEntity, profile: SyncProfile) -> dict[LedgerField, str]:
    status = normalize_status(source.active)
    values = {
        LedgerField.LISTED_STATUS: status.listed_status.value,
        LedgerField.EMPLOYMENT_STATUS: status.employment_status.value,
    }
    return {status_field: values[status_field] for status_field in profile.status_fields}


def compute_diff(source: SourceEntity, record: LedgerRecord, profile: SyncProfile) -> UpdatePlan:
    """Return the minimal plan bringing ``record`` in line with ``source``.

    The returned plan may be empty; it is never ``None``.
    """

    current = record.fields
    changes: FieldChanges = {}

    if current.value(profile.identity_field) != source.id:
        changes[profile.identity_field] = source.id

    for tracked in profile.tracked_fields:
        desired = tracked.source_value(source)
        if desired is None:
            # A cell that does not normalize (e.g. a short phone) still counts as set.
            if tracked.clear_on_blank and _has_value(current.value(tracked.field)):
                changes[tracked.field] = None
            continue
        if desired != tracked.ledger_value(current):
            changes[tracked.field] = desired

    for status_field, desired_status in _status_values(source, profile).items():
        if current.value(status_field) != desired_status:
            changes[status_field] = desired_status

    return UpdatePlan(
        record_id=record.record_id,
        changes=changes,
        source_id=source.id,
        purpose=PlanPurpose.SYNC,
    )


def build_create_plan(source: SourceEntity, profile: SyncProfile) -> CreatePlan:
    """Field map for a brand-new ledger record describing ``source``."""

    candidates: FieldChanges = {
        profile.identity_field: source.id,
        LedgerField.NAME: normalize_text(source.name),
        LedgerField.EMAIL: normalize_email(source.email),
        LedgerField.PHONE: normalize_phone(source.phone),
        LedgerField.HIRE_DATE: normalize_date(source.hire_date),
        LedgerField.REGION: normalize_region(source.tenant_id),
        **_status_values(source, profile),
    }
    for tracked in profile.tracked_fields:
        candidates.setdefault(tracked.field, tracked.source_value(source))
    changes = {key: value for key, value in candidates.items() if value is not None}
    return CreatePlan(source_id=source.id, changes=changes, reason="no ledger record matched")
