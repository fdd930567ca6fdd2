"""Snapshots read from the system of record and from the ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from dataclasses import fields as dataclass_fields
from typing import TYPE_CHECKING

from .enums import LedgerField, ListedStatus

if TYPE_CHECKING:
    from datetime import date, datetime


type LedgerValue = str | bool | None
type FieldChanges = dict[LedgerField, LedgerValue]


@dataclass(slots=True, kw_only=True)
class SourceEntity:
    """One employee-derived row from the system of record.

    Several rows may describe the same person (re-hires, duplicate data entry);
    they are reduced to one canonical row before matching.
    """

    id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    active: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tenant_id: str | None = None
    hire_date: date | str | None = None
    license_number: str | None = None
    license_expiry: date | str | None = None
    license_type: str | None = None
    role: str | None = None
    department: str | None = None

    def __post_init__(self) -> None:
        if self.id is None:
            raise ValueError("SourceEntity.id must not be None")
        self.id = str(self.id)


@dataclass(frozen=True, slots=True, kw_only=True)
class LedgerFields:
    """Typed view over a ledger row's field map."""

    employee_id: str | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    listed_status: str | None = None
    employment_status: str | None = None
    region: str | None = None
    hire_date: str | None = None
    license_number: str | None = None
    license_expiry: str | None = None
    license_type: str | None = None
    role: str | None = None
    department: str | None = None
    potential_duplicate: bool = False

    def value(self, ledger_field: LedgerField) -> LedgerValue:
        return getattr(self, ledger_field.value)

    def as_mapping(self) -> FieldChanges:
        return {LedgerField(item.name): getattr(self, item.name) for item in dataclass_fields(self)}


@dataclass(frozen=True, slots=True, kw_only=True)
class LedgerRecord:
    """One row of the external ledger; ``record_id`` is assigned by the store."""

    record_id: str
    fields: LedgerFields = field(default_factory=LedgerFields)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.fields.listed_status == ListedStatus.ACTIVE

    @property
    def is_flagged_duplicate(self) -> bool:
        return self.fields.potential_duplicate
