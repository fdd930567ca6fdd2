"""Translation between Airtable rows and the typed ledger model.

Display column names live here and nowhere else; the engine only ever sees
:class:`LedgerField` keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from ledgersync.domain.model import LedgerField, LedgerFields, LedgerRecord

from .schema import AirtableRecordPayload

if TYPE_CHECKING:
    from ledgersync.domain.model import FieldChanges

DUPLICATE_FLAG_VALUE: Final[str] = "Yes"

DEFAULT_COLUMNS: Final[Mapping[LedgerField, str]] = MappingProxyType(
    {
        LedgerField.EMPLOYEE_ID: "RSC Emp ID",
        LedgerField.NAME: "Name",
        LedgerField.EMAIL: "Email",
        LedgerField.PHONE: "Phone",
        LedgerField.LISTED_STATUS: "Status-RSPG",
        LedgerField.EMPLOYMENT_STATUS: "Status",
        LedgerField.REGION: "Region",
        LedgerField.HIRE_DATE: "RSC Hire Date",
        LedgerField.LICENSE_NUMBER: "GC - RSPG",
        LedgerField.LICENSE_EXPIRY: "GC Exp Date - RSPG",
        LedgerField.LICENSE_TYPE: "license type id - RSPG",
        LedgerField.ROLE: "Role",
        LedgerField.DEPARTMENT: "Department",
        LedgerField.POTENTIAL_DUPLICATE: "Potential Duplicate",
    }
)


# The roles table holds one Active/Inactive "Status" column and no contact fields.
ROLE_TABLE_COLUMNS: Final[Mapping[LedgerField, str]] = MappingProxyType(
    {
        LedgerField.EMPLOYEE_ID: "RSC Emp ID",
        LedgerField.LISTED_STATUS: "Status",
        LedgerField.ROLE: "Role",
        LedgerField.DEPARTMENT: "Department",
    }
)


@dataclass(frozen=True, slots=True)
class LedgerSchema:
    """Maps ledger fields onto the table's display column names."""

    columns: Mapping[LedgerField, str] = field(default_factory=lambda: DEFAULT_COLUMNS)

    def column(self, ledger_field: LedgerField) -> str:
        try:
            return self.columns[ledger_field]
        except KeyError:
            raise KeyError(f"No ledger column configured for {ledger_field.value}") from None

    def with_overrides(self, overrides: Mapping[LedgerField, str]) -> LedgerSchema:
        return LedgerSchema(columns={**self.columns, **overrides})


def schema_for(profile: str) -> LedgerSchema:
    """Column layout of the table a sync profile reads and writes."""

    if profile == "role":
        return LedgerSchema(columns=ROLE_TABLE_COLUMNS)
    return LedgerSchema()


def _cell_text(raw: object) -> str | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if isinstance(raw, list):
        parts = [text for item in raw if (text := _cell_text(item)) is not None]
        return ", ".join(parts) or None
    text = str(raw)
    return text if text.strip() else None


def _cell_flag(raw: object) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().casefold() == DUPLICATE_FLAG_VALUE.casefold()
    return False


def record_from_payload(
    payload: AirtableRecordPayload | Mapping[str, object],
    schema: LedgerSchema | None = None,
) -> LedgerRecord:
    """Build a :class:`LedgerRecord` from one Airtable record payload."""

    active_schema = schema or LedgerSchema()
    model = (
        payload
        if isinstance(payload, AirtableRecordPayload)
        else AirtableRecordPayload.model_validate(payload)
    )
    values: dict[str, object] = {}
    for ledger_field, column in active_schema.columns.items():
        raw = model.fields.get(column)
        if ledger_field is LedgerField.POTENTIAL_DUPLICATE:
            values[ledger_field.value] = _cell_flag(raw)
        else:
            values[ledger_field.value] = _cell_text(raw)
    return LedgerRecord(
        record_id=model.id,
        fields=LedgerFields(**values),  # type: ignore[arg-type]
        created_at=model.created_time,
    )


def changes_to_payload(
    changes: FieldChanges,
    schema: LedgerSchema | None = None,
) -> dict[str, object]:
    """Serialize a field map for a PATCH/POST body; ``None`` stays ``null``."""

    active_schema = schema or LedgerSchema()
    payload: dict[str, object] = {}
    for ledger_field, value in changes.items():
        column = active_schema.column(ledger_field)
        if ledger_field is LedgerField.POTENTIAL_DUPLICATE:
            payload[column] = DUPLICATE_FLAG_VALUE if value else None
        else:
            payload[column] = value
    return payload
