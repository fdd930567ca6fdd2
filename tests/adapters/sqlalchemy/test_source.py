from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy import text
from sqlalchemy.engine import Engine  # noqa: TC002

from ledgersync.adapters.sqlalchemy import SourceStoreError, SqlAlchemySourceStore, entity_from_row
from ledgersync.domain.ports import SourceFilter, SourceStore

CONTACT_QUERY = """
    SELECT id, name, email, phone, active, created_at, updated_at, tenant_id, hire_date
    FROM people
    WHERE (:active_only = 0 OR active = 1)
    ORDER BY id
"""


@pytest.fixture
def people_engine(sqlite_engine: Engine) -> Engine:
    with sqlite_engine.begin() as connection:
        connection.execute(
            text(
                "CREATE TABLE people ("
                "id INTEGER PRIMARY KEY, name TEXT, email TEXT, phone TEXT, active BOOLEAN, "
                "created_at TEXT, updated_at TEXT, tenant_id INTEGER, hire_date TEXT)"
            )
        )
        connection.execute(
            text(
                "INSERT INTO people VALUES "
                "(1, 'Jane Doe', 'jane@example.com', '(555) 123-4567', 1, "
                "'2024-01-01 08:00:00', '2024-02-01 09:30:00', 2, '2020-05-17'), "
                "(2, 'Old Timer', NULL, NULL, 0, NULL, NULL, NULL, NULL)"
            )
        )
    return sqlite_engine


def test_fetch_entities_maps_rows(people_engine: Engine) -> None:
    store = SqlAlchemySourceStore(engine=people_engine, queries={"contact": CONTACT_QUERY})

    entities = store.fetch_entities(SourceFilter(profile="contact"))

    assert isinstance(store, SourceStore)
    assert [entity.id for entity in entities] == ["1", "2"]
    jane = entities[0]
    assert jane.name == "Jane Doe"
    assert jane.active is True
    assert jane.tenant_id == "2"
    assert jane.hire_date == "2020-05-17"
    assert jane.created_at == datetime(2024, 1, 1, 8, 0)  # noqa: DTZ001
    assert jane.updated_at == datetime(2024, 2, 1, 9, 30)  # noqa: DTZ001
    assert entities[1].active is False
    assert entities[1].email is None


def test_active_only_filter_is_bound(people_engine: Engine) -> None:
    store = SqlAlchemySourceStore(engine=people_engine, queries={"contact": CONTACT_QUERY})

    entities = store.fetch_entities(SourceFilter(profile="contact", active_only=True))

    assert [entity.id for entity in entities] == ["1"]


def test_unknown_profile_query_raises(people_engine: Engine) -> None:
    store = SqlAlchemySourceStore(engine=people_engine, queries={})

    with pytest.raises(SourceStoreError, match="No source query"):
        store.fetch_entities(SourceFilter(profile="contact"))


def test_database_errors_are_wrapped(sqlite_engine: Engine) -> None:
    store = SqlAlchemySourceStore(engine=sqlite_engine, queries={"contact": CONTACT_QUERY})

    with pytest.raises(SourceStoreError) as excinfo:
        store.fetch_entities(SourceFilter(profile="contact"))

    assert excinfo.value.__cause__ is not None


def test_entity_from_row_keeps_date_objects() -> None:
    entity = entity_from_row(
        {"id": 9, "license_expiry": date(2025, 1, 31), "created_at": date(2024, 1, 1)}
    )

    assert entity.id == "9"
    assert entity.license_expiry == date(2025, 1, 31)
    assert entity.created_at == datetime(2024, 1, 1)  # noqa: DTZ001
    assert entity.active is False


def test_entity_from_row_requires_id() -> None:
    with pytest.raises(SourceStoreError):
        entity_from_row({"name": "Nobody"})
