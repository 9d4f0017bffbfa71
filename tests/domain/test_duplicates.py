from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shelfwise.domain.contributions import submit_store
from shelfwise.domain.duplicates import (
    StoreCandidate,
    check_duplicate_store,
    normalize_website_url,
)
from shelfwise.domain.errors import ConflictError
from shelfwise.domain.model import ModerationStatus, StoreType
from tests.helpers.catalog import make_store, regular_actor, seed

if TYPE_CHECKING:
    from collections.abc import Callable

    from shelfwise.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

    UowFactory = Callable[[], SqlAlchemyUnitOfWork]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("https://www.Example.com/", "https://example.com"),
        ("example.com/shop/", "https://example.com/shop"),
        ("http://example.com/shop?ref=ad", "http://example.com/shop"),
        ("   ", None),
        (None, None),
    ],
)
def test_normalize_website_url(raw: str | None, expected: str | None) -> None:
    assert normalize_website_url(raw) == expected


def test_physical_store_matches_on_place_id(sqlite_unit_of_work: UowFactory) -> None:
    existing = make_store("Green Grocer", place_id="place-123")
    seed(sqlite_unit_of_work, existing)
    candidate = StoreCandidate(name="Green Grocer Downtown", place_id="place-123")

    with sqlite_unit_of_work() as uow:
        check = check_duplicate_store(uow.repositories.stores, candidate)

    assert check.exact_match is not None
    assert check.exact_match.id == existing.id


def test_regular_submission_of_known_place_creates_nothing(
    sqlite_unit_of_work: UowFactory,
) -> None:
    existing = make_store("Green Grocer", place_id="place-123")
    seed(sqlite_unit_of_work, existing)
    candidate = StoreCandidate(name="Green Grocer", place_id="place-123")

    with sqlite_unit_of_work() as uow, pytest.raises(ConflictError) as excinfo:
        submit_store(uow, candidate, actor=regular_actor())

    assert excinfo.value.existing is not None
    with sqlite_unit_of_work() as uow:
        assert len(uow.repositories.stores.find_by_name("Green Grocer")) == 1


def test_online_store_matches_on_name_and_normalized_url(
    sqlite_unit_of_work: UowFactory,
) -> None:
    existing = make_store(
        "Vegan Pantry",
        store_type=StoreType.ONLINE_RETAILER,
        website_url="https://www.veganpantry.com/",
    )
    seed(sqlite_unit_of_work, existing)

    with sqlite_unit_of_work() as uow:
        stores = uow.repositories.stores
        same = check_duplicate_store(
            stores,
            StoreCandidate(
                name="vegan pantry",
                store_type=StoreType.ONLINE_RETAILER,
                website_url="veganpantry.com",
            ),
        )
        other_site = check_duplicate_store(
            stores,
            StoreCandidate(
                name="Vegan Pantry",
                store_type=StoreType.ONLINE_RETAILER,
                website_url="https://veganpantry.co.uk",
            ),
        )

    assert same.exact_match is not None
    assert same.exact_match.id == existing.id
    assert other_site.exact_match is None
    assert [store.id for store in other_site.similar_stores] == [existing.id]


def test_online_match_spans_retailer_and_brand_direct(
    sqlite_unit_of_work: UowFactory,
) -> None:
    retailer = make_store(
        "Thrive Market",
        store_type=StoreType.ONLINE_RETAILER,
        website_url="https://www.thrivemarket.com/",
    )
    shopfront = make_store(
        "Thrive Market",
        store_type=StoreType.BRICK_AND_MORTAR,
        website_url="https://thrivemarket.com",
    )
    seed(sqlite_unit_of_work, shopfront, retailer)

    with sqlite_unit_of_work() as uow:
        check = check_duplicate_store(
            uow.repositories.stores,
            StoreCandidate(
                name="thrive market",
                store_type=StoreType.BRAND_DIRECT,
                website_url="https://thrivemarket.com",
            ),
        )

    assert check.exact_match is not None
    assert check.exact_match.id == retailer.id
    assert not check.is_clear


def test_similar_stores_are_limited_and_exclude_rejected(
    sqlite_unit_of_work: UowFactory,
) -> None:
    stores = [make_store("Health Hut") for _ in range(4)]
    rejected = make_store("Health Hut", status=ModerationStatus.REJECTED)
    online = make_store("Health Hut", store_type=StoreType.ONLINE_RETAILER)
    seed(sqlite_unit_of_work, *stores, rejected, online)

    with sqlite_unit_of_work() as uow:
        check = check_duplicate_store(
            uow.repositories.stores, StoreCandidate(name="health hut"), similar_limit=3
        )

    assert check.exact_match is None
    assert len(check.similar_stores) == 3
    assert rejected.id not in {store.id for store in check.similar_stores}
    assert online.id not in {store.id for store in check.similar_stores}


def test_no_matches_is_clear(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow:
        check = check_duplicate_store(uow.repositories.stores, StoreCandidate(name="Brand New"))

    assert check.is_clear
