"""Write plans handed from the diff stage to the update executor.

A plan only ever carries fields whose canonical value differs from what the
ledger holds; a ``None`` value means the field is cleared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgersync.domain.model import FieldChanges


class PlanPurpose(StrEnum):
    SYNC = "sync"
    CREATE = "create"
    MARK_DUPLICATE = "mark_duplicate"


@dataclass(slots=True, kw_only=True)
class UpdatePlan:
    """Partial update of one existing ledger record."""

    record_id: str
    changes: FieldChanges = field(default_factory=dict)
    source_id: str | None = None
    purpose: PlanPurpose = PlanPurpose.SYNC
    reason: str | None = None

    @property
    def target(self) -> str:
        return self.record_id

    @property
    def is_empty(self) -> bool:
        return not self.changes


@dataclass(slots=True, kw_only=True)
class CreatePlan:
    """New ledger record for a source entity the ledger does not know yet."""

    source_id: str
    changes: FieldChanges = field(default_factory=dict)
    purpose: PlanPurpose = PlanPurpose.CREATE
    reason: str | None = None

    @property
    def target(self) -> str:
        return f"new:{self.source_id}"

    @property
    def is_empty(self) -> bool:
        return not self.changes


type WritePlan = UpdatePlan | CreatePlan
