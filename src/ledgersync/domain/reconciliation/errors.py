"""Error taxonomy of a reconciliation pass."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ReconciliationError(RuntimeError):
    """Base class for pass-level failures."""


class LoadFailure(ReconciliationError):
    """A full read of the source or the ledger failed; nothing was written."""

    def __init__(self, store: str, cause: BaseException) -> None:
        super().__init__(f"Failed to load {store}: {cause}")
        self.store = store
        self.cause = cause


class IllegalTransitionError(ReconciliationError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move reconciliation pass from {current} to {target}")
        self.current = current
        self.target = target


class ValidationFailure(ValueError):
    """A source row or a write plan failed basic field validation."""

    def __init__(self, subject: str, errors: Sequence[str]) -> None:
        joined = "; ".join(errors)
        super().__init__(f"{subject}: {joined}")
        self.subject = subject
        self.errors = tuple(errors)
