"""Port for the external ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ledgersync.domain.model import FieldChanges, LedgerField, LedgerRecord


@runtime_checkable
class LedgerStore(Protocol):
    """Full reads and partial writes against the ledger.

    ``fetch_all`` consumes every page before returning. In ``update`` and
    ``create`` a ``None`` value clears the field and must reach the store.
    """

    def fetch_all(self, fields: Sequence[LedgerField]) -> list[LedgerRecord]: ...

    def update(self, record_id: str, changes: FieldChanges) -> LedgerRecord: ...

    def create(self, changes: FieldChanges) -> LedgerRecord: ...


__all__ = ["LedgerStore"]
