"""Port for reading candidate rows from the system of record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ledgersync.domain.model import SourceEntity


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceFilter:
    """Which rows a pass wants; ``profile`` selects the query."""

    profile: str
    active_only: bool = False


@runtime_checkable
class SourceStore(Protocol):
    """Read-only access to the system of record.

    Implementations return every candidate row at once and raise on failure;
    a partial result must never be returned.
    """

    def fetch_entities(self, source_filter: SourceFilter) -> Sequence[SourceEntity]: ...


__all__ = ["SourceFilter", "SourceStore"]
