from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect, text

from shelfwise.adapters.sqlalchemy import TABLE_BY_CLASS
from shelfwise.adapters.sqlalchemy.repositories import SqlAlchemyStoreRepository
from shelfwise.domain.model import ModerationStatus
from tests.helpers.catalog import make_store

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_migrations_create_every_mapped_table(sqlite_engine: Engine) -> None:
    tables = set(inspect(sqlite_engine).get_table_names())

    assert {table.name for table in TABLE_BY_CLASS.values()} <= tables
    assert "shelfwise_schema_version" in tables


def test_migrated_columns_match_mapped_columns(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    for table in TABLE_BY_CLASS.values():
        migrated = {column["name"] for column in inspector.get_columns(table.name)}
        assert migrated == {column.name for column in table.columns}, table.name


def test_status_is_stored_by_name_and_read_back_as_enum(sqlite_session: Session) -> None:
    repository = SqlAlchemyStoreRepository(sqlite_session)
    store = make_store(status=ModerationStatus.PENDING)
    repository.add(store)
    sqlite_session.commit()

    raw = sqlite_session.execute(
        text("SELECT moderation_status FROM store WHERE name = :name"), {"name": store.name}
    ).scalar_one()
    sqlite_session.expire_all()
    stored = repository.get(store.id)

    assert raw == "PENDING"
    assert stored is not None
    assert stored.moderation_status is ModerationStatus.PENDING


def test_missing_status_round_trips_as_null(sqlite_session: Session) -> None:
    repository = SqlAlchemyStoreRepository(sqlite_session)
    store = make_store(status=None)
    repository.add(store)
    sqlite_session.commit()
    sqlite_session.expire_all()

    stored = repository.get(store.id)

    assert stored is not None
    assert stored.moderation_status is None
    assert stored.is_live
