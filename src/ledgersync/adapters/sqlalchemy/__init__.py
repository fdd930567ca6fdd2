"""SQLAlchemy-backed source store."""

from __future__ import annotations

from .queries import DEFAULT_QUERIES, SOURCE_COLUMNS
from .source import SourceStoreError, SqlAlchemySourceStore, entity_from_row

__all__ = [
    "DEFAULT_QUERIES",
    "SOURCE_COLUMNS",
    "SourceStoreError",
    "SqlAlchemySourceStore",
    "entity_from_row",
]
