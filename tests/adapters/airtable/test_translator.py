from __future__ import annotations

from datetime import UTC, datetime

from ledgersync.adapters.airtable import (
    LedgerSchema,
    changes_to_payload,
    record_from_payload,
    schema_for,
)
from ledgersync.domain.model import LedgerField


def test_record_from_payload_maps_display_columns() -> None:
    record = record_from_payload(
        {
            "id": "recA",
            "createdTime": "2024-01-02T03:04:05.000Z",
            "fields": {
                "RSC Emp ID": 42,
                "Name": "Jane Doe",
                "Phone": "",
                "Status": "Separated",
                "Potential Duplicate": "Yes",
                "Department": ["Ops", "Security"],
                "Unrelated": "ignored",
            },
        }
    )

    assert record.record_id == "recA"
    assert record.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    assert record.fields.employee_id == "42"
    assert record.fields.name == "Jane Doe"
    assert record.fields.phone is None
    assert record.fields.employment_status == "Separated"
    assert record.fields.listed_status is None
    assert record.fields.department == "Ops, Security"
    assert record.is_flagged_duplicate


def test_duplicate_flag_accepts_checkbox_values() -> None:
    checked = record_from_payload({"id": "rec1", "fields": {"Potential Duplicate": True}})
    unchecked = record_from_payload({"id": "rec2", "fields": {"Potential Duplicate": "No"}})

    assert checked.is_flagged_duplicate
    assert not unchecked.is_flagged_duplicate


def test_changes_to_payload_keeps_nulls_and_writes_flag_literal() -> None:
    payload = changes_to_payload(
        {
            LedgerField.PHONE: "5551234567",
            LedgerField.EMPLOYMENT_STATUS: "Hired",
            LedgerField.LISTED_STATUS: "Active",
            LedgerField.EMAIL: None,
            LedgerField.POTENTIAL_DUPLICATE: True,
        }
    )

    assert payload == {
        "Phone": "5551234567",
        "Status": "Hired",
        "Status-RSPG": "Active",
        "Email": None,
        "Potential Duplicate": "Yes",
    }


def test_schema_overrides_rename_columns() -> None:
    schema = LedgerSchema().with_overrides({LedgerField.EMPLOYEE_ID: "Employee Number"})

    record = record_from_payload({"id": "rec1", "fields": {"Employee Number": "7"}}, schema)

    assert record.fields.employee_id == "7"
    assert changes_to_payload({LedgerField.EMPLOYEE_ID: "7"}, schema) == {"Employee Number": "7"}


def test_role_table_status_column_holds_the_listed_status() -> None:
    schema = schema_for("role")

    record = record_from_payload(
        {"id": "recR", "fields": {"RSC Emp ID": "42", "Role": "Guard", "Status": "Active"}},
        schema,
    )

    assert record.fields.listed_status == "Active"
    assert record.fields.employment_status is None
    assert changes_to_payload({LedgerField.LISTED_STATUS: "Inactive"}, schema) == {
        "Status": "Inactive"
    }
    assert schema_for("contact") == LedgerSchema()
