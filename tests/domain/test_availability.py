from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from shelfwise.domain.availability import (
    StatusCounts,
    aggregate_availability,
    product_availability,
    visible_products,
)
from shelfwise.domain.model import ModerationStatus
from tests.helpers.catalog import make_availability, make_store, regular_actor, seed

if TYPE_CHECKING:
    from collections.abc import Callable

    from shelfwise.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

    UowFactory = Callable[[], SqlAlchemyUnitOfWork]


def test_status_counts_total() -> None:
    counts = StatusCounts()
    for status in (
        ModerationStatus.CONFIRMED,
        ModerationStatus.PENDING,
        ModerationStatus.PENDING,
        ModerationStatus.REJECTED,
    ):
        counts.add(status)

    assert (counts.confirmed, counts.pending, counts.rejected, counts.total) == (1, 2, 1, 4)


def test_aggregate_counts_every_requested_store(sqlite_unit_of_work: UowFactory) -> None:
    busy = make_store("Busy")
    empty = make_store("Empty")
    seed(
        sqlite_unit_of_work,
        busy,
        empty,
        make_availability(uuid4(), busy.id),
        make_availability(uuid4(), busy.id, status=None),
        make_availability(uuid4(), busy.id, status=ModerationStatus.PENDING),
        make_availability(uuid4(), busy.id, status=ModerationStatus.REJECTED),
    )
    unknown = uuid4()

    with sqlite_unit_of_work() as uow:
        counts = aggregate_availability(
            uow.repositories.availability, [busy.id, empty.id, unknown]
        )

    assert set(counts) == {busy.id, empty.id, unknown}
    busy_counts = counts[busy.id]
    assert (busy_counts.confirmed, busy_counts.pending, busy_counts.rejected) == (2, 1, 1)
    assert counts[empty.id].total == 0
    assert counts[unknown].total == 0


def test_duplicate_pairs_are_logged_and_counted_once(
    sqlite_unit_of_work: UowFactory, caplog: pytest.LogCaptureFixture
) -> None:
    store = make_store()
    product_id = uuid4()
    newer = make_availability(product_id, store.id, status=ModerationStatus.PENDING)
    older = make_availability(product_id, store.id)
    older.created_at = newer.created_at - timedelta(minutes=5)
    seed(sqlite_unit_of_work, store, newer, older)

    with sqlite_unit_of_work() as uow, caplog.at_level(logging.ERROR):
        counts = aggregate_availability(uow.repositories.availability, [store.id])

    duplicate_counts = counts[store.id]
    assert (duplicate_counts.confirmed, duplicate_counts.pending) == (1, 0)
    assert duplicate_counts.total == 1
    assert str(newer.id) in caplog.text


def test_visible_products_use_confirmed_or_missing_status(
    sqlite_unit_of_work: UowFactory,
) -> None:
    store = make_store()
    confirmed, legacy, pending, rejected = (uuid4() for _ in range(4))
    seed(
        sqlite_unit_of_work,
        store,
        make_availability(confirmed, store.id),
        make_availability(legacy, store.id, status=None),
        make_availability(pending, store.id, status=ModerationStatus.PENDING),
        make_availability(rejected, store.id, status=ModerationStatus.REJECTED),
    )

    with sqlite_unit_of_work() as uow:
        visible = visible_products(uow.repositories.availability, store.id)

    assert set(visible) == {confirmed, legacy}


def test_product_availability_shows_own_pending_reports(sqlite_unit_of_work: UowFactory) -> None:
    viewer = regular_actor()
    stranger = regular_actor()
    product_id = uuid4()
    stores = [make_store(f"Store {index}") for index in range(4)]
    mine = make_availability(
        product_id, stores[1].id, status=ModerationStatus.PENDING, created_by=viewer.user_id
    )
    theirs = make_availability(
        product_id, stores[2].id, status=ModerationStatus.PENDING, created_by=stranger.user_id
    )
    confirmed = make_availability(product_id, stores[0].id)
    rejected = make_availability(
        product_id, stores[3].id, status=ModerationStatus.REJECTED, created_by=viewer.user_id
    )
    seed(sqlite_unit_of_work, *stores, mine, theirs, confirmed, rejected)

    with sqlite_unit_of_work() as uow:
        repository = uow.repositories.availability
        as_viewer = {
            record.id for record in product_availability(repository, product_id, viewer=viewer)
        }
        anonymous = {record.id for record in product_availability(repository, product_id)}

    assert as_viewer == {confirmed.id, mine.id}
    assert anonymous == {confirmed.id}
