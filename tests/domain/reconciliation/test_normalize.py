from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from ledgersync.domain.model import EmploymentStatus, ListedStatus
from ledgersync.domain.reconciliation.normalize import (
    UNKNOWN_REGION,
    normalize_date,
    normalize_email,
    normalize_name_key,
    normalize_phone,
    normalize_region,
    normalize_status,
    normalize_text,
)

PHONE_SAMPLES = [
    "(555) 123-4567",
    "+1 555 123 4567",
    "555.123.4567 ext",
    "5551234567",
    "12345",
    "",
    "no digits here",
    None,
]

DATE_SAMPLES = [
    "2023-01-15",
    "01/15/2023",
    "2023/01/15",
    "15-Jan-2023",
    "Jan 15, 2023",
    "2023-01-15T00:00:00Z",
    "not-a-date",
    "",
    None,
]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("(555) 123-4567", "5551234567"),
        ("+1 555 123 4567", "5551234567"),
        ("5551234567", "5551234567"),
        ("12345", None),
        ("", None),
        ("no digits here", None),
        (None, None),
    ],
)
def test_normalize_phone(raw: str | None, expected: str | None) -> None:
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize("raw", PHONE_SAMPLES)
def test_normalize_phone_is_idempotent(raw: str | None) -> None:
    once = normalize_phone(raw)
    assert normalize_phone(once) == once


def test_normalize_date_round_trip_examples() -> None:
    assert normalize_date("2023-01-15") == "01/15/2023"
    assert normalize_date(None) is None
    assert normalize_date("not-a-date") is None


@pytest.mark.parametrize("raw", DATE_SAMPLES)
def test_normalize_date_is_idempotent(raw: str | None) -> None:
    once = normalize_date(raw)
    assert normalize_date(once) == once


def test_normalize_date_accepts_date_objects() -> None:
    assert normalize_date(date(2024, 6, 30)) == "06/30/2024"
    assert normalize_date(datetime(2024, 6, 30, 23, 59)) == "06/30/2024"  # noqa: DTZ001


def test_normalize_date_uses_utc_calendar_fields() -> None:
    eastern = timezone(timedelta(hours=-5))
    late_evening = datetime(2023, 1, 15, 22, 0, tzinfo=eastern)
    assert normalize_date(late_evening) == "01/16/2023"
    assert normalize_date(datetime(2023, 1, 15, 0, 0, tzinfo=UTC)) == "01/15/2023"
    assert normalize_date("2023-01-15T00:00:00Z") == "01/15/2023"


def test_normalize_status_mapping() -> None:
    active = normalize_status(True)  # noqa: FBT003
    inactive = normalize_status(False)  # noqa: FBT003

    assert (active.listed_status, active.employment_status) == (
        ListedStatus.ACTIVE,
        EmploymentStatus.HIRED,
    )
    assert (inactive.listed_status, inactive.employment_status) == (
        ListedStatus.INACTIVE,
        EmploymentStatus.SEPARATED,
    )


@pytest.mark.parametrize(
    ("tenant_id", "expected"),
    [("2", "CA"), ("3", "LA"), (4, "GA"), ("5", "NM"), ("6", "CA"), ("13", "UK")],
)
def test_normalize_region_known_tenants(tenant_id: str | int, expected: str) -> None:
    assert normalize_region(tenant_id) == expected


@pytest.mark.parametrize("tenant_id", [None, "", "99", "abc"])
def test_normalize_region_falls_back_to_unknown(tenant_id: str | None) -> None:
    assert normalize_region(tenant_id) == UNKNOWN_REGION


def test_text_and_identity_folding() -> None:
    assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"
    assert normalize_email("   ") is None
    assert normalize_text("  Jane   Doe ") == "Jane Doe"
    assert normalize_name_key("  Jane  O'Doe ") == "jane odoe"
    assert normalize_name_key("...") is None
