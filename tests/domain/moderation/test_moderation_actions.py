from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shelfwise.domain.catalog import CanonicalEntry, OverrideEntry, resolve_product
from shelfwise.domain.edits import EditTargetRef, submit_edit
from shelfwise.domain.errors import ForbiddenError, UnauthenticatedError, ValidationError
from shelfwise.domain.model import Contributor, EntityKind, ModerationStatus, TrustTier
from shelfwise.domain.moderation import classify
from shelfwise.domain.moderation.actions import (
    approve,
    approve_edit,
    archive_product,
    mark_reviewed,
    moderation_summary,
    reject,
    reject_edit,
    set_trusted_contributor,
    unarchive_product,
)
from tests.helpers.catalog import (
    admin_actor,
    make_city_page,
    make_product,
    make_store,
    make_user_product,
    moderator_actor,
    regular_actor,
    seed,
    trusted_actor,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from shelfwise.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

    UowFactory = Callable[[], SqlAlchemyUnitOfWork]


def _headline(factory: UowFactory, slug: str = "portland-or") -> str:
    with factory() as uow:
        page = uow.repositories.city_pages.get_by_slug(slug)
        assert page is not None
        return page.headline


@pytest.fixture
def seeded_page(sqlite_unit_of_work: UowFactory) -> None:
    page = make_city_page("portland-or")
    page.headline = "Old"
    seed(sqlite_unit_of_work, page)


def test_actions_require_an_administrator(sqlite_unit_of_work: UowFactory) -> None:
    store = make_store(status=ModerationStatus.PENDING)
    seed(sqlite_unit_of_work, store)

    with sqlite_unit_of_work() as uow:
        with pytest.raises(UnauthenticatedError):
            approve(uow, EntityKind.STORE, store.id, actor=None)
        with pytest.raises(ForbiddenError):
            approve(uow, EntityKind.STORE, store.id, actor=moderator_actor())
        with pytest.raises(ForbiddenError):
            archive_product(uow, store.id, actor=trusted_actor())


def test_approve_and_reject_contributions(sqlite_unit_of_work: UowFactory) -> None:
    store = make_store(status=ModerationStatus.PENDING)
    product = make_user_product(status=ModerationStatus.PENDING)
    seed(sqlite_unit_of_work, store, product)
    admin = admin_actor()

    with sqlite_unit_of_work() as uow:
        approved = approve(uow, EntityKind.STORE, store.id, actor=admin)
    with sqlite_unit_of_work() as uow:
        rejected = reject(uow, EntityKind.USER_PRODUCT, product.id, actor=admin)

    assert approved.status is ModerationStatus.CONFIRMED
    assert rejected.status is ModerationStatus.REJECTED
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.stores.get(store.id)
        assert stored is not None
        assert stored.reviewed_by == admin.user_id
        with pytest.raises(ValidationError):
            approve(uow, EntityKind.STORE, store.id, actor=admin)


def test_unknown_kind_is_rejected(sqlite_unit_of_work: UowFactory) -> None:
    product = make_product()
    seed(sqlite_unit_of_work, product)

    with sqlite_unit_of_work() as uow, pytest.raises(ValidationError):
        approve(uow, EntityKind.PRODUCT, product.id, actor=admin_actor())


def test_mark_reviewed_clears_flag_on_live_content(sqlite_unit_of_work: UowFactory) -> None:
    store = make_store()
    store.needs_review = True
    store.trusted_contribution = True
    seed(sqlite_unit_of_work, store)

    with sqlite_unit_of_work() as uow:
        outcome = mark_reviewed(uow, EntityKind.STORE, store.id, actor=admin_actor())

    assert outcome.needs_review is False
    assert outcome.status is ModerationStatus.CONFIRMED


def test_approving_pending_edit_applies_it(
    sqlite_unit_of_work: UowFactory, seeded_page: None
) -> None:
    with sqlite_unit_of_work() as uow:
        pending = submit_edit(
            uow, EditTargetRef.city("portland-or"), "headline", "New", actor=regular_actor()
        )
    assert _headline(sqlite_unit_of_work) == "Old"

    with sqlite_unit_of_work() as uow:
        outcome = approve_edit(uow, pending.suggestion_id, actor=admin_actor(), note="Looks right")

    assert outcome.status is ModerationStatus.APPROVED
    assert _headline(sqlite_unit_of_work) == "New"
    with sqlite_unit_of_work() as uow:
        row = uow.repositories.content_edits.get(pending.suggestion_id)
        assert row is not None
        assert row.review_note == "Looks right"
        with pytest.raises(ValidationError):
            approve_edit(uow, pending.suggestion_id, actor=admin_actor())


def test_approve_dispatches_content_edits(
    sqlite_unit_of_work: UowFactory, seeded_page: None
) -> None:
    with sqlite_unit_of_work() as uow:
        pending = submit_edit(
            uow, EditTargetRef.city("portland-or"), "headline", "New", actor=regular_actor()
        )
    with sqlite_unit_of_work() as uow:
        approve(uow, EntityKind.CONTENT_EDIT, pending.suggestion_id, actor=admin_actor())

    assert _headline(sqlite_unit_of_work) == "New"


def test_rejecting_applied_edit_reverts_current_value(
    sqlite_unit_of_work: UowFactory, seeded_page: None
) -> None:
    with sqlite_unit_of_work() as uow:
        applied = submit_edit(
            uow, EditTargetRef.city("portland-or"), "headline", "New", actor=trusted_actor()
        )
    with sqlite_unit_of_work() as uow:
        outcome = reject_edit(uow, applied.suggestion_id, actor=admin_actor())

    assert outcome.reverted is True
    assert outcome.status is ModerationStatus.REJECTED
    assert outcome.needs_review is False
    assert _headline(sqlite_unit_of_work) == "Old"


def test_rejecting_superseded_edit_leaves_target_alone(
    sqlite_unit_of_work: UowFactory, seeded_page: None, caplog: pytest.LogCaptureFixture
) -> None:
    target = EditTargetRef.city("portland-or")
    with sqlite_unit_of_work() as uow:
        first = submit_edit(uow, target, "headline", "New", actor=trusted_actor())
    with sqlite_unit_of_work() as uow:
        submit_edit(uow, target, "headline", "Newer", actor=trusted_actor())

    with sqlite_unit_of_work() as uow, caplog.at_level("WARNING"):
        outcome = reject_edit(uow, first.suggestion_id, actor=admin_actor())

    assert outcome.reverted is False
    assert "Not reverting" in caplog.text
    assert _headline(sqlite_unit_of_work) == "Newer"


def test_rejecting_pending_edit_never_touches_target(
    sqlite_unit_of_work: UowFactory, seeded_page: None
) -> None:
    with sqlite_unit_of_work() as uow:
        pending = submit_edit(
            uow, EditTargetRef.city("portland-or"), "headline", "New", actor=regular_actor()
        )
    with sqlite_unit_of_work() as uow:
        outcome = reject_edit(uow, pending.suggestion_id, actor=admin_actor())

    assert outcome.reverted is False
    assert _headline(sqlite_unit_of_work) == "Old"


def test_reverting_product_edit_restores_canonical_values(
    sqlite_unit_of_work: UowFactory,
) -> None:
    canonical = make_product("Oat Milk")
    seed(sqlite_unit_of_work, canonical)
    with sqlite_unit_of_work() as uow:
        applied = submit_edit(
            uow, EditTargetRef.product(canonical.id), "name", "Oat Drink", actor=trusted_actor()
        )
    with sqlite_unit_of_work() as uow:
        reject_edit(uow, applied.suggestion_id, actor=admin_actor())

    with sqlite_unit_of_work() as uow:
        entry = resolve_product(uow.repositories, canonical.id)
    assert isinstance(entry, OverrideEntry)
    assert entry.product.name == "Oat Milk"
    with sqlite_unit_of_work() as uow:
        shadow = uow.repositories.user_products.find_shadow(canonical.id)
        assert shadow is not None
        assert shadow.needs_review is False
        assert uow.repositories.user_products.list_needing_review() == []
        summary = moderation_summary(uow.repositories)
    assert summary.by_kind[EntityKind.USER_PRODUCT].needs_review == 0


def test_archive_hides_canonical_and_shadow(sqlite_unit_of_work: UowFactory) -> None:
    canonical = make_product("Oat Milk")
    shadow = make_user_product("Oat Drink", source=canonical)
    seed(sqlite_unit_of_work, canonical, shadow)
    admin = admin_actor()

    with sqlite_unit_of_work() as uow:
        archive_product(uow, canonical.id, actor=admin)
    with sqlite_unit_of_work() as uow:
        assert resolve_product(uow.repositories, canonical.id) is None
        assert resolve_product(uow.repositories, canonical.id, allow_archived=True) is not None

    with sqlite_unit_of_work() as uow:
        unarchive_product(uow, canonical.id, actor=admin)
    with sqlite_unit_of_work() as uow:
        assert isinstance(resolve_product(uow.repositories, canonical.id), OverrideEntry)


def test_archive_user_originated_product(sqlite_unit_of_work: UowFactory) -> None:
    product = make_user_product()
    canonical = make_product()
    seed(sqlite_unit_of_work, product, canonical)

    with sqlite_unit_of_work() as uow:
        archive_product(uow, product.id, actor=admin_actor())
    with sqlite_unit_of_work() as uow:
        assert resolve_product(uow.repositories, product.id) is None
        assert isinstance(resolve_product(uow.repositories, canonical.id), CanonicalEntry)


def test_set_trusted_contributor(sqlite_unit_of_work: UowFactory) -> None:
    contributor = Contributor(display_name="Helper")
    seed(sqlite_unit_of_work, contributor)

    with sqlite_unit_of_work() as uow:
        set_trusted_contributor(uow, contributor.id, trusted=True, actor=admin_actor())
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.contributors.get(contributor.id)
        assert stored is not None
        assert classify(stored) is TrustTier.TRUSTED

    with sqlite_unit_of_work() as uow:
        set_trusted_contributor(uow, contributor.id, trusted=False, actor=admin_actor())
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.contributors.get(contributor.id)
        assert stored is not None
        assert classify(stored) is TrustTier.REGULAR


def test_moderation_summary_counts_queues(
    sqlite_unit_of_work: UowFactory, seeded_page: None
) -> None:
    pending_store = make_store("Pending", status=ModerationStatus.PENDING)
    flagged_store = make_store("Flagged")
    flagged_store.needs_review = True
    flagged_store.trusted_contribution = True
    seed(
        sqlite_unit_of_work,
        pending_store,
        flagged_store,
        make_user_product("Pending product", status=ModerationStatus.PENDING),
    )
    with sqlite_unit_of_work() as uow:
        submit_edit(uow, EditTargetRef.city("portland-or"), "headline", "A", actor=regular_actor())
    with sqlite_unit_of_work() as uow:
        submit_edit(
            uow, EditTargetRef.city("portland-or"), "description", "B", actor=trusted_actor()
        )

    with sqlite_unit_of_work() as uow:
        summary = moderation_summary(uow.repositories)

    assert summary.by_kind[EntityKind.STORE].pending == 1
    assert summary.by_kind[EntityKind.STORE].needs_review == 1
    assert summary.by_kind[EntityKind.USER_PRODUCT].pending == 1
    assert summary.by_kind[EntityKind.CONTENT_EDIT].pending == 1
    assert summary.by_kind[EntityKind.CONTENT_EDIT].needs_review == 1
    assert summary.by_kind[EntityKind.REVIEW].pending == 0
    assert summary.total_pending == 3
    assert summary.total_needs_review == 2


def test_mark_reviewed_signs_off_trusted_edit(
    sqlite_unit_of_work: UowFactory, seeded_page: None
) -> None:
    with sqlite_unit_of_work() as uow:
        applied = submit_edit(
            uow, EditTargetRef.city("portland-or"), "headline", "New", actor=trusted_actor()
        )
    assert applied.needs_review is True

    with sqlite_unit_of_work() as uow:
        outcome = mark_reviewed(
            uow, EntityKind.CONTENT_EDIT, applied.suggestion_id, actor=admin_actor()
        )

    assert outcome.needs_review is False
    assert outcome.status is ModerationStatus.APPROVED
    assert _headline(sqlite_unit_of_work) == "New"
