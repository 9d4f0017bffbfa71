from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from uuid import UUID

import pytest

from shelfwise.domain.model import Contributor, Role
from shelfwise.ui import cli
from tests.helpers.catalog import make_availability, make_city_page, make_product, make_store, seed

if TYPE_CHECKING:
    from collections.abc import Callable

    from shelfwise.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

    UowFactory = Callable[[], SqlAlchemyUnitOfWork]


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> Any:
    cli.main(list(argv))
    return json.loads(capsys.readouterr().out)


def _exit_code(*argv: str) -> int | str | None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(list(argv))
    return excinfo.value.code


@pytest.fixture
def admin(sqlite_unit_of_work: UowFactory) -> Contributor:
    contributor = Contributor(display_name="Admin", role=Role.ADMIN)
    seed(sqlite_unit_of_work, contributor)
    return contributor


def test_user_create_and_trust(
    sqlite_unit_of_work: UowFactory, admin: Contributor, capsys: pytest.CaptureFixture[str]
) -> None:
    created = _run(capsys, "user", "create", "--display-name", "Kim", "--email", "kim@example.com")
    trusted = _run(capsys, "--as-user", str(admin.id), "user", "trust", created["id"])

    assert created["role"] == "user"
    assert trusted["trusted_contributor"] is True
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.contributors.get(UUID(created["id"]))
        assert stored is not None
        assert stored.trusted_contributor is True


def test_edit_applies_for_admin(
    sqlite_unit_of_work: UowFactory, admin: Contributor, capsys: pytest.CaptureFixture[str]
) -> None:
    seed(sqlite_unit_of_work, make_city_page("portland-or"))

    result = _run(
        capsys,
        "--as-user",
        str(admin.id),
        "edit",
        "city",
        "portland-or",
        "headline",
        "Plant-based Portland",
    )

    assert result["applied"] is True
    assert result["message"] == "Applied"
    with sqlite_unit_of_work() as uow:
        page = uow.repositories.city_pages.get_by_slug("portland-or")
        assert page is not None
        assert page.headline == "Plant-based Portland"


def test_edit_without_user_exits_with_domain_error(sqlite_unit_of_work: UowFactory) -> None:
    seed(sqlite_unit_of_work, make_city_page("portland-or"))

    assert _exit_code("edit", "city", "portland-or", "headline", "New") == 1


def test_edit_value_and_clear_are_exclusive(sqlite_unit_of_work: UowFactory) -> None:
    assert _exit_code("edit", "city", "portland-or", "headline", "New", "--clear") == 2
    assert _exit_code("edit", "city", "portland-or", "headline") == 2


def test_invalid_arguments_exit_with_usage_error(sqlite_unit_of_work: UowFactory) -> None:
    assert _exit_code("--as-user", "not-a-uuid", "catalog", "list") == 2
    assert _exit_code("store", "check", "{not json") == 2
    assert _exit_code("store", "check", '{"name": ""}') == 2


def test_catalog_list_and_product_show(
    sqlite_unit_of_work: UowFactory, capsys: pytest.CaptureFixture[str]
) -> None:
    product = make_product("Oat Milk", brand="Acme")
    seed(sqlite_unit_of_work, product, make_product("Soy Milk", brand="Other"))

    listing = _run(capsys, "catalog", "list", "--brand", "ACME")
    shown = _run(capsys, "product", "show", str(product.id))

    assert listing["total_count"] == 1
    assert listing["items"][0]["name"] == "Oat Milk"
    assert shown["source"] == "canonical"
    assert shown["product"]["name"] == "Oat Milk"
    assert shown["rating"]["count"] == 0


def test_store_check_reports_exact_match(
    sqlite_unit_of_work: UowFactory, capsys: pytest.CaptureFixture[str]
) -> None:
    store = make_store("Green Grocer", place_id="place-9")
    seed(sqlite_unit_of_work, store)

    result = _run(
        capsys, "store", "check", json.dumps({"name": "Green Grocer", "place_id": "place-9"})
    )

    assert result["exact_match"] == str(store.id)


def test_availability_counts(
    sqlite_unit_of_work: UowFactory, capsys: pytest.CaptureFixture[str]
) -> None:
    store = make_store()
    product = make_product()
    seed(sqlite_unit_of_work, store, product, make_availability(product.id, store.id, status=None))

    result = _run(capsys, "availability", "counts", str(store.id))

    assert result[str(store.id)] == {"confirmed": 1, "pending": 0, "rejected": 0, "total": 1}


def test_moderation_summary_requires_admin(
    sqlite_unit_of_work: UowFactory, admin: Contributor, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _exit_code("moderation", "summary") == 1

    summary = _run(capsys, "--as-user", str(admin.id), "moderation", "summary")

    assert summary["total_pending"] == 0
    assert "store" in summary["by_kind"]
