from __future__ import annotations

from ledgersync.domain.model import MatchKeyKind
from ledgersync.domain.reconciliation.keys import LedgerIndex, identity_key, keys_for_source
from ledgersync.domain.reconciliation.resolve import MatchStatus, resolve
from tests.support.ledger import make_record, make_source


def test_employee_id_beats_email() -> None:
    by_email = make_record("recB", email="jane@example.com")
    by_id = make_record("recA", employee_id="42")
    index = LedgerIndex.build([by_email, by_id])
    source = make_source("42", email="Jane@Example.com")

    result = resolve(source, index)

    assert result.record is by_id
    assert result.key_kind is MatchKeyKind.EMPLOYEE_ID
    assert result.status is MatchStatus.RESOLVED


def test_falls_through_precedence_to_phone_then_name() -> None:
    by_phone = make_record("recP", phone="555-123-4567")
    by_name = make_record("recN", name="Jane Doe")
    index = LedgerIndex.build([by_name, by_phone])

    phone_match = resolve(make_source("7", phone="(555) 123 4567", name="Jane Doe"), index)
    name_match = resolve(make_source("8", name="  jane   doe"), index)

    assert phone_match.record is by_phone
    assert phone_match.key_kind is MatchKeyKind.PHONE
    assert name_match.record is by_name
    assert name_match.key_kind is MatchKeyKind.NAME


def test_blank_values_never_match() -> None:
    index = LedgerIndex.build([make_record("recA", email="", phone=None, name=None)])
    source = make_source("1", email="  ", phone="", name=None)

    result = resolve(source, index)

    assert not result.matched
    assert result.status is MatchStatus.UNMATCHED
    assert identity_key(MatchKeyKind.EMAIL, "   ") is None
    assert keys_for_source(source) == (identity_key(MatchKeyKind.EMPLOYEE_ID, "1"),)


def test_ambiguous_bucket_returns_first_in_fetch_order() -> None:
    first = make_record("rec1", email="shared@example.com")
    second = make_record("rec2", email="shared@example.com")
    index = LedgerIndex.build([first, second])

    result = resolve(make_source("9", email="shared@example.com"), index)

    assert result.record is first
    assert result.ambiguous
    assert result.candidates == (first, second)
    assert result.status is MatchStatus.AMBIGUOUS


def test_restricted_key_kinds_ignore_other_keys() -> None:
    index = LedgerIndex.build([make_record("recA", email="jane@example.com")])
    source = make_source("42", email="jane@example.com")

    result = resolve(source, index, key_kinds=(MatchKeyKind.EMPLOYEE_ID,))

    assert not result.matched


def test_index_reports_identity_collisions() -> None:
    index = LedgerIndex.build(
        [
            make_record("rec1", employee_id="42"),
            make_record("rec2", employee_id=" 42 "),
            make_record("rec3", employee_id="43"),
        ]
    )

    collisions = index.collisions(MatchKeyKind.EMPLOYEE_ID)

    assert list(collisions) == ["42"]
    assert [record.record_id for record in collisions["42"]] == ["rec1", "rec2"]
    assert index.size == 3
