"""Enumerations shared across the ledger domain."""

from __future__ import annotations

from enum import StrEnum


class LedgerField(StrEnum):
    """Fields of a ledger record the engine reads or writes.

    Values double as attribute names on ``LedgerFields``.
    """

    EMPLOYEE_ID = "employee_id"
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    LISTED_STATUS = "listed_status"
    EMPLOYMENT_STATUS = "employment_status"
    REGION = "region"
    HIRE_DATE = "hire_date"
    LICENSE_NUMBER = "license_number"
    LICENSE_EXPIRY = "license_expiry"
    LICENSE_TYPE = "license_type"
    ROLE = "role"
    DEPARTMENT = "department"
    POTENTIAL_DUPLICATE = "potential_duplicate"


class ListedStatus(StrEnum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class EmploymentStatus(StrEnum):
    HIRED = "Hired"
    SEPARATED = "Separated"


class MatchKeyKind(StrEnum):
    """Identity key kinds, declared in matching precedence order."""

    EMPLOYEE_ID = "employee_id"
    EMAIL = "email"
    PHONE = "phone"
    NAME = "name"


MATCH_PRECEDENCE: tuple[MatchKeyKind, ...] = tuple(MatchKeyKind)
