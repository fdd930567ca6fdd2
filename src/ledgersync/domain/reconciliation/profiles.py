"""Sync profiles: the tracked-field sets the engine is parameterized with.

One engine serves every sync purpose; what differs between purposes is which
ledger fields are tracked, how they are read from the source row, and which
identity keys may be used to match.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ledgersync.domain.model import MATCH_PRECEDENCE, LedgerField, MatchKeyKind

from .canonical import DEFAULT_GROUPING_KEYS
from .normalize import (
    normalize_date,
    normalize_email,
    normalize_phone,
    normalize_region,
    normalize_text,
)

if TYPE_CHECKING:
    from ledgersync.domain.model import LedgerFields, SourceEntity


STATUS_FIELDS: tuple[LedgerField, ...] = (LedgerField.LISTED_STATUS, LedgerField.EMPLOYMENT_STATUS)

_KEY_FIELDS: dict[MatchKeyKind, LedgerField] = {
    MatchKeyKind.EMAIL: LedgerField.EMAIL,
    MatchKeyKind.PHONE: LedgerField.PHONE,
    MatchKeyKind.NAME: LedgerField.NAME,
}


class FieldKind(StrEnum):
    TEXT = "text"
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    REGION = "region"


def _region(raw: object) -> str | None:
    return normalize_region(None if raw is None else str(raw))


def _text(raw: object) -> str | None:
    return normalize_text(None if raw is None else str(raw))


_CANONICALIZERS: dict[FieldKind, Callable[[object], str | None]] = {
    FieldKind.TEXT: _text,
    FieldKind.NAME: _text,
    FieldKind.EMAIL: lambda raw: normalize_email(None if raw is None else str(raw)),
    FieldKind.PHONE: lambda raw: normalize_phone(None if raw is None else str(raw)),
    FieldKind.DATE: normalize_date,  # type: ignore[dict-item]
    FieldKind.REGION: _region,
}
# Ledger cells already hold region codes rather than tenant ids.
_LEDGER_CANONICALIZERS: dict[FieldKind, Callable[[object], str | None]] = {
    **_CANONICALIZERS,
    FieldKind.REGION: _text,
}


@dataclass(frozen=True, slots=True)
class TrackedField:
    """One ledger field kept in agreement with a source attribute."""

    field: LedgerField
    source_attr: str
    kind: FieldKind = FieldKind.TEXT
    clear_on_blank: bool = True

    def source_value(self, entity: SourceEntity) -> str | None:
        return _CANONICALIZERS[self.kind](getattr(entity, self.source_attr))

    def ledger_value(self, fields: LedgerFields) -> str | None:
        return _LEDGER_CANONICALIZERS[self.kind](fields.value(self.field))


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncProfile:
    name: str
    tracked_fields: tuple[TrackedField, ...]
    identity_field: LedgerField = LedgerField.EMPLOYEE_ID
    match_keys: tuple[MatchKeyKind, ...] = MATCH_PRECEDENCE
    grouping_keys: tuple[MatchKeyKind, ...] = DEFAULT_GROUPING_KEYS
    create_missing: bool = False
    active_only: bool = False
    status_fields: tuple[LedgerField, ...] = STATUS_FIELDS
    supports_duplicates: bool = True

    def ledger_fields(self) -> tuple[LedgerField, ...]:
        """Every ledger field a pass with this profile needs to read.

        Only the identity field, the fields behind the match keys, the status
        fields and the tracked fields are requested; some tables hold nothing else.
        """

        wanted = [
            self.identity_field,
            *(_KEY_FIELDS[kind] for kind in self.match_keys if kind in _KEY_FIELDS),
            *self.status_fields,
            *(tracked.field for tracked in self.tracked_fields),
        ]
        return tuple(dict.fromkeys(wanted))


_NAME = TrackedField(LedgerField.NAME, "name", FieldKind.NAME, clear_on_blank=False)
_EMAIL = TrackedField(LedgerField.EMAIL, "email", FieldKind.EMAIL)
_PHONE = TrackedField(LedgerField.PHONE, "phone", FieldKind.PHONE)

CONTACT_PROFILE = SyncProfile(
    name="contact",
    tracked_fields=(_EMAIL, _PHONE),
)

EMPLOYEE_PROFILE = SyncProfile(
    name="employee",
    tracked_fields=(
        _NAME,
        _EMAIL,
        _PHONE,
        TrackedField(LedgerField.HIRE_DATE, "hire_date", FieldKind.DATE),
        TrackedField(LedgerField.REGION, "tenant_id", FieldKind.REGION),
    ),
    create_missing=True,
)

LICENSE_PROFILE = SyncProfile(
    name="license",
    tracked_fields=(
        TrackedField(LedgerField.LICENSE_NUMBER, "license_number"),
        TrackedField(LedgerField.LICENSE_EXPIRY, "license_expiry", FieldKind.DATE),
        TrackedField(LedgerField.LICENSE_TYPE, "license_type"),
    ),
    match_keys=(MatchKeyKind.EMPLOYEE_ID,),
    grouping_keys=(MatchKeyKind.EMPLOYEE_ID,),
)

ROLE_PROFILE = SyncProfile(
    name="role",
    tracked_fields=(
        TrackedField(LedgerField.ROLE, "role"),
        TrackedField(LedgerField.DEPARTMENT, "department"),
    ),
    match_keys=(MatchKeyKind.EMPLOYEE_ID,),
    grouping_keys=(MatchKeyKind.EMPLOYEE_ID,),
    # The roles table carries a single Active/Inactive status column.
    status_fields=(LedgerField.LISTED_STATUS,),
    supports_duplicates=False,
)

PROFILES: dict[str, SyncProfile] = {
    profile.name: profile
    for profile in (CONTACT_PROFILE, EMPLOYEE_PROFILE, LICENSE_PROFILE, ROLE_PROFILE)
}


def get_profile(name: str) -> SyncProfile:
    try:
        return PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise ValueError(f"Unknown sync profile {name!r} (known: {known})") from None
