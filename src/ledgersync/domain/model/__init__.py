"""Domain model for employee/ledger reconciliation."""

from __future__ import annotations

from .entities import (
    FieldChanges,
    LedgerFields,
    LedgerRecord,
    LedgerValue,
    SourceEntity,
)
from .enums import (
    MATCH_PRECEDENCE,
    EmploymentStatus,
    LedgerField,
    ListedStatus,
    MatchKeyKind,
)

__all__ = [
    "MATCH_PRECEDENCE",
    "EmploymentStatus",
    "FieldChanges",
    "LedgerField",
    "LedgerFields",
    "LedgerRecord",
    "LedgerValue",
    "ListedStatus",
    "MatchKeyKind",
    "SourceEntity",
]
