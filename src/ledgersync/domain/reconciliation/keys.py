"""Identity keys and the per-pass ledger index.

Keys are derived from normalized values only. A blank value never produces a
key, so two records that both lack an email can never meet on the email key.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ledgersync.domain.model import MATCH_PRECEDENCE, LedgerRecord, MatchKeyKind, SourceEntity

from .normalize import normalize_email, normalize_name_key, normalize_phone

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class IdentityKey:
    kind: MatchKeyKind
    value: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"


def _normalize_employee_id(raw: str | int | None) -> str | None:
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


_NORMALIZERS: dict[MatchKeyKind, Callable[[str | None], str | None]] = {
    MatchKeyKind.EMPLOYEE_ID: _normalize_employee_id,
    MatchKeyKind.EMAIL: normalize_email,
    MatchKeyKind.PHONE: normalize_phone,
    MatchKeyKind.NAME: normalize_name_key,
}


def identity_key(kind: MatchKeyKind, raw: str | None) -> IdentityKey | None:
    """Build a key of ``kind`` from ``raw``; ``None`` when the value is blank."""

    value = _NORMALIZERS[kind](raw)
    if value is None:
        return None
    return IdentityKey(kind, value)


def keys_for_source(
    entity: SourceEntity,
    kinds: Sequence[MatchKeyKind] = MATCH_PRECEDENCE,
) -> tuple[IdentityKey, ...]:
    raw_values = {
        MatchKeyKind.EMPLOYEE_ID: entity.id,
        MatchKeyKind.EMAIL: entity.email,
        MatchKeyKind.PHONE: entity.phone,
        MatchKeyKind.NAME: entity.name,
    }
    return _present_keys(raw_values, kinds)


def keys_for_record(
    record: LedgerRecord,
    kinds: Sequence[MatchKeyKind] = MATCH_PRECEDENCE,
) -> tuple[IdentityKey, ...]:
    raw_values = {
        MatchKeyKind.EMPLOYEE_ID: record.fields.employee_id,
        MatchKeyKind.EMAIL: record.fields.email,
        MatchKeyKind.PHONE: record.fields.phone,
        MatchKeyKind.NAME: record.fields.name,
    }
    return _present_keys(raw_values, kinds)


def _present_keys(
    raw_values: dict[MatchKeyKind, str | None],
    kinds: Sequence[MatchKeyKind],
) -> tuple[IdentityKey, ...]:
    keys: list[IdentityKey] = []
    for kind in kinds:
        key = identity_key(kind, raw_values[kind])
        if key is not None:
            keys.append(key)
    return tuple(keys)


def _new_buckets() -> dict[MatchKeyKind, dict[str, list[LedgerRecord]]]:
    return {kind: {} for kind in MatchKeyKind}


@dataclass(slots=True)
class LedgerIndex:
    """Ledger records bucketed by every identity key they carry.

    Buckets keep fetch order and expose every colliding record; callers decide
    what to do with more than one candidate.
    """

    _buckets: dict[MatchKeyKind, dict[str, list[LedgerRecord]]] = field(
        default_factory=_new_buckets, repr=False
    )
    size: int = 0

    @classmethod
    def build(cls, records: Iterable[LedgerRecord]) -> LedgerIndex:
        index = cls()
        for record in records:
            index.add(record)
        return index

    def add(self, record: LedgerRecord) -> None:
        self.size += 1
        for key in keys_for_record(record):
            self._buckets[key.kind].setdefault(key.value, []).append(record)

    def candidates(self, key: IdentityKey) -> tuple[LedgerRecord, ...]:
        return tuple(self._buckets[key.kind].get(key.value, ()))

    def collisions(self, kind: MatchKeyKind) -> dict[str, tuple[LedgerRecord, ...]]:
        """Return every bucket of ``kind`` holding more than one record."""

        return {
            value: tuple(records)
            for value, records in self._buckets[kind].items()
            if len(records) > 1
        }


def connected_groups[T](
    items: Sequence[T],
    keys_of: Callable[[T], Iterable[IdentityKey]],
) -> list[tuple[tuple[T, ...], tuple[IdentityKey, ...]]]:
    """Group items connected through any shared key, transitively.

    Each group comes with the keys held by more than one of its members.
    Groups are ordered by their first member; members keep input order.
    """

    parents = list(range(len(items)))

    def find(position: int) -> int:
        while parents[position] != position:
            parents[position] = parents[parents[position]]
            position = parents[position]
        return position

    def union(left: int, right: int) -> None:
        left_root, right_root = find(left), find(right)
        if left_root == right_root:
            return
        low, high = sorted((left_root, right_root))
        parents[high] = low

    first_seen: dict[IdentityKey, int] = {}
    shared: dict[IdentityKey, None] = {}
    for position, item in enumerate(items):
        for key in keys_of(item):
            owner = first_seen.setdefault(key, position)
            if owner != position:
                shared[key] = None
                union(owner, position)

    members: dict[int, list[T]] = {}
    for position, item in enumerate(items):
        members.setdefault(find(position), []).append(item)
    group_keys: dict[int, list[IdentityKey]] = {}
    for key in shared:
        group_keys.setdefault(find(first_seen[key]), []).append(key)
    return [(tuple(group), tuple(group_keys.get(root, ()))) for root, group in members.items()]
