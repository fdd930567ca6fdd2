"""Source store reading candidate rows through SQLAlchemy Core."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ledgersync.domain.model import SourceEntity

from .queries import DEFAULT_QUERIES

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.engine import Engine

    from ledgersync.domain.ports import SourceFilter

log = logging.getLogger(__name__)


class SourceStoreError(RuntimeError):
    """Raised when the system of record cannot be queried."""


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_datetime(value: object) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)  # noqa: DTZ001
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        log.warning("Ignoring unparseable timestamp %r", value)
        return None


def _as_date(value: object) -> date | str | None:
    if value is None or isinstance(value, date):
        return value
    return str(value)


def entity_from_row(row: Mapping[str, object]) -> SourceEntity:
    """Map one result row onto a :class:`SourceEntity`; missing columns stay empty."""

    if row.get("id") is None:
        raise SourceStoreError("Source row without an id column value")
    return SourceEntity(
        id=str(row["id"]),
        name=_as_text(row.get("name")),
        email=_as_text(row.get("email")),
        phone=_as_text(row.get("phone")),
        active=bool(row.get("active")),
        created_at=_as_datetime(row.get("created_at")),
        updated_at=_as_datetime(row.get("updated_at")),
        tenant_id=_as_text(row.get("tenant_id")),
        hire_date=_as_date(row.get("hire_date")),
        license_number=_as_text(row.get("license_number")),
        license_expiry=_as_date(row.get("license_expiry")),
        license_type=_as_text(row.get("license_type")),
        role=_as_text(row.get("role")),
        department=_as_text(row.get("department")),
    )


@dataclass(slots=True)
class SqlAlchemySourceStore:
    """Run the profile's query and return every row at once."""

    engine: Engine
    queries: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_QUERIES))

    def fetch_entities(self, source_filter: SourceFilter) -> list[SourceEntity]:
        query = self.queries.get(source_filter.profile)
        if query is None:
            raise SourceStoreError(f"No source query configured for {source_filter.profile!r}")
        try:
            with self.engine.connect() as connection:
                result = connection.execute(
                    text(query), {"active_only": source_filter.active_only}
                )
                rows = [dict(row._mapping) for row in result]  # noqa: SLF001
        except SQLAlchemyError as exc:
            raise SourceStoreError(f"Source query for {source_filter.profile!r} failed") from exc
        log.info("Fetched %s source rows for profile %s", len(rows), source_filter.profile)
        return [entity_from_row(row) for row in rows]
