"""Domain port definitions for adapters."""

from __future__ import annotations

from .ledger import LedgerStore
from .source import SourceFilter, SourceStore

__all__ = [
    "LedgerStore",
    "SourceFilter",
    "SourceStore",
]
