"""Public interface for the Airtable ledger adapter."""

from __future__ import annotations

from .client import AirtableLedgerStore, LedgerStoreError
from .schema import AirtableRecordPayload, ErrorResponse, ListRecordsResponse
from .translator import (
    DEFAULT_COLUMNS,
    ROLE_TABLE_COLUMNS,
    LedgerSchema,
    changes_to_payload,
    record_from_payload,
    schema_for,
)

__all__ = [
    "DEFAULT_COLUMNS",
    "ROLE_TABLE_COLUMNS",
    "AirtableLedgerStore",
    "AirtableRecordPayload",
    "ErrorResponse",
    "LedgerSchema",
    "LedgerStoreError",
    "ListRecordsResponse",
    "changes_to_payload",
    "record_from_payload",
    "schema_for",
]
