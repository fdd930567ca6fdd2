"""Identity resolution of canonical source entities against the ledger index.

Responsibilities of this stage:
- try identity keys in strict precedence (employee id, email, phone, name)
- stop at the first key that yields any candidate
- pick the first candidate in fetch order, flagging the result as ambiguous
  when the bucket held more than one record

Out of scope for this stage:
- deciding whether an unmatched entity becomes a new ledger record
- diffing or writing
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ledgersync.domain.model import MATCH_PRECEDENCE

from .keys import keys_for_source

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ledgersync.domain.model import LedgerRecord, MatchKeyKind, SourceEntity

    from .keys import IdentityKey, LedgerIndex


class MatchStatus(StrEnum):
    UNMATCHED = "unmatched"
    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchResult:
    """A source entity paired with at most one ledger record."""

    source: SourceEntity
    record: LedgerRecord | None = None
    key: IdentityKey | None = None
    candidates: tuple[LedgerRecord, ...] = ()

    @property
    def matched(self) -> bool:
        return self.record is not None

    @property
    def ambiguous(self) -> bool:
        return len(self.candidates) > 1

    @property
    def key_kind(self) -> MatchKeyKind | None:
        return self.key.kind if self.key is not None else None

    @property
    def status(self) -> MatchStatus:
        if self.record is None:
            return MatchStatus.UNMATCHED
        if self.ambiguous:
            return MatchStatus.AMBIGUOUS
        return MatchStatus.RESOLVED


def resolve(
    source: SourceEntity,
    index: LedgerIndex,
    *,
    key_kinds: Sequence[MatchKeyKind] = MATCH_PRECEDENCE,
) -> MatchResult:
    """Return the ledger record matching ``source`` by the highest-precedence key."""

    ordered_kinds = [kind for kind in MATCH_PRECEDENCE if kind in key_kinds]
    for key in keys_for_source(source, ordered_kinds):
        candidates = index.candidates(key)
        if not candidates:
            continue
        return MatchResult(
            source=source,
            record=candidates[0],
            key=key,
            candidates=candidates,
        )
    return MatchResult(source=source)
