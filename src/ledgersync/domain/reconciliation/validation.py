"""Basic field validation for source rows and write plans.

Validators return a list of human readable problems; an empty list means the
subject is acceptable. Callers decide whether to skip, record or raise.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from ledgersync.domain.model import EmploymentStatus, LedgerField, ListedStatus

from .errors import ValidationFailure
from .normalize import normalize_date, normalize_phone

if TYPE_CHECKING:
    from datetime import date

    from ledgersync.domain.model import FieldChanges, LedgerValue, SourceEntity

    from .plan import WritePlan

_EMAIL_PATTERN: Final = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_DATE_FIELDS: Final = frozenset({LedgerField.HIRE_DATE, LedgerField.LICENSE_EXPIRY})


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return _EMAIL_PATTERN.match(value.strip()) is not None


def is_valid_phone(value: str | None) -> bool:
    if not value:
        return False
    return normalize_phone(value) is not None


def is_valid_date(value: date | str | None) -> bool:
    if value is None or value == "":
        return False
    return normalize_date(value) is not None


def validate_source_entity(entity: SourceEntity) -> list[str]:
    errors: list[str] = []
    if not entity.id.strip():
        errors.append("Employee id is required")
    if not (entity.name or "").strip():
        errors.append("Name is required")
    if entity.email and not is_valid_email(entity.email):
        errors.append(f"Invalid email format: {entity.email!r}")
    if entity.phone and not is_valid_phone(entity.phone):
        errors.append(f"Invalid phone number format: {entity.phone!r}")
    if entity.hire_date and not is_valid_date(entity.hire_date):
        errors.append(f"Invalid hire date: {entity.hire_date!r}")
    if entity.license_expiry and not is_valid_date(entity.license_expiry):
        errors.append(f"Invalid license expiry: {entity.license_expiry!r}")
    return errors


def validate_changes(changes: FieldChanges) -> list[str]:
    """Check the values a plan is about to write; ``None`` (clear) always passes."""

    errors: list[str] = []
    for ledger_field, value in changes.items():
        if value is None:
            continue
        problem = _check_value(ledger_field, value)
        if problem is not None:
            errors.append(problem)
    return errors


def _check_value(ledger_field: LedgerField, value: LedgerValue) -> str | None:
    if ledger_field is LedgerField.POTENTIAL_DUPLICATE:
        return None if isinstance(value, bool) else f"Invalid duplicate flag: {value!r}"
    if not isinstance(value, str):
        return f"Invalid value for {ledger_field.value}: {value!r}"
    if ledger_field is LedgerField.EMAIL and not is_valid_email(value):
        return f"Invalid email format: {value!r}"
    if ledger_field is LedgerField.PHONE and not is_valid_phone(value):
        return f"Invalid phone number format: {value!r}"
    if ledger_field in _DATE_FIELDS and not is_valid_date(value):
        return f"Invalid date for {ledger_field.value}: {value!r}"
    if ledger_field is LedgerField.LISTED_STATUS and value not in set(ListedStatus):
        return f"Invalid listed status {value!r}; must be Active or Inactive"
    if ledger_field is LedgerField.EMPLOYMENT_STATUS and value not in set(EmploymentStatus):
        return f"Invalid employment status {value!r}; must be Hired or Separated"
    return None


def ensure_valid_plan(plan: WritePlan) -> None:
    """Raise :class:`ValidationFailure` when ``plan`` carries invalid values."""

    errors = validate_changes(plan.changes)
    if errors:
        raise ValidationFailure(plan.target, errors)
