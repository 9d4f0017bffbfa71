"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from shelfwise.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from shelfwise.config import get_moderation_config
from shelfwise.domain.availability import (
    StatusCounts,
    aggregate_availability,
    product_availability,
)
from shelfwise.domain.catalog import (
    CatalogEntry,
    CatalogSummary,
    Page,
    PageRequest,
    RatingStats,
    SortKey,
    get_product,
    list_catalog,
    rating_stats,
)
from shelfwise.domain.contributions import (
    ProductDraft,
    SubmissionResult,
    report_availability,
    submit_product,
    submit_review,
    submit_store,
)
from shelfwise.domain.duplicates import DuplicateCheck, StoreCandidate, check_duplicate_store
from shelfwise.domain.edits import EditResult, EditTargetRef, submit_edit
from shelfwise.domain.model import Actor, AvailabilityRecord, Contributor, EntityKind, Role
from shelfwise.domain.moderation import actions
from shelfwise.domain.moderation.trust import is_privileged
from shelfwise.domain.ports.unit_of_work import CatalogUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from shelfwise.domain.ports import CatalogFilter, CatalogRepositories

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _factory(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    _ensure_started()
    return SqlAlchemyUnitOfWork


def resolve_actor(repositories: CatalogRepositories, user_id: UUID | None) -> Actor | None:
    """Build the caller identity from a stored contributor.

    An unknown id yields no actor, so write paths fail as unauthenticated.
    """

    if user_id is None:
        return None
    contributor = repositories.contributors.get(user_id)
    if contributor is None:
        log.warning("No contributor with id %s; treating caller as anonymous", user_id)
        return None
    return contributor.as_actor()


def create_contributor(
    *,
    display_name: str,
    email: str | None = None,
    role: Role = Role.USER,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Contributor:
    """Persist a new contributor and return it."""

    contributor = Contributor(display_name=display_name, email=email, role=role)
    with _factory(unit_of_work_factory)() as uow:
        uow.repositories.contributors.add(contributor)
        uow.commit()
    log.info("Created contributor %s (%s)", contributor.id, role)
    return contributor


def suggest_edit(
    target: EditTargetRef,
    field_name: str,
    value: str | None,
    *,
    user_id: UUID | None,
    reason: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> EditResult:
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        return submit_edit(uow, target, field_name, value, actor=actor, reason=reason)


def contribute_product(
    draft: ProductDraft,
    *,
    user_id: UUID | None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SubmissionResult:
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        return submit_product(uow, draft, actor=actor)


def contribute_store(
    candidate: StoreCandidate,
    *,
    user_id: UUID | None,
    allow_similar: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SubmissionResult:
    config = get_moderation_config()
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        return submit_store(
            uow,
            candidate,
            actor=actor,
            allow_similar=allow_similar,
            similar_limit=config.similar_store_limit,
        )


def check_store(
    candidate: StoreCandidate,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DuplicateCheck:
    """Run duplicate detection without creating anything."""

    config = get_moderation_config()
    with _factory(unit_of_work_factory)() as uow:
        return check_duplicate_store(
            uow.repositories.stores, candidate, similar_limit=config.similar_store_limit
        )


def contribute_availability(
    product_id: UUID,
    store_id: UUID,
    *,
    user_id: UUID | None,
    price_range: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SubmissionResult:
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        return report_availability(uow, product_id, store_id, actor=actor, price_range=price_range)


def contribute_review(
    product_id: UUID,
    *,
    user_id: UUID | None,
    rating: int,
    comment: str,
    title: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SubmissionResult:
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        return submit_review(
            uow, product_id, actor=actor, rating=rating, comment=comment, title=title
        )


@dataclass(slots=True, frozen=True)
class ProductView:
    entry: CatalogEntry
    rating: RatingStats
    availability: list[AvailabilityRecord] = field(default_factory=list[AvailabilityRecord])


def show_product(
    product_id: UUID,
    *,
    user_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ProductView:
    with _factory(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        actor = resolve_actor(repositories, user_id)
        entry = get_product(repositories, product_id, actor=actor)
        return ProductView(
            entry=entry,
            rating=rating_stats(repositories, entry.logical_id),
            availability=product_availability(
                repositories.availability, entry.logical_id, viewer=actor
            ),
        )


def browse_catalog(
    catalog_filter: CatalogFilter | None = None,
    *,
    page: int = 1,
    page_size: int | None = None,
    sort: SortKey = SortKey.NAME,
    user_id: UUID | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Page[CatalogSummary]:
    config = get_moderation_config()
    request = PageRequest(page=page, page_size=page_size or config.default_page_size, sort=sort)
    with _factory(unit_of_work_factory)() as uow:
        repositories = uow.repositories
        actor = resolve_actor(repositories, user_id)
        return list_catalog(
            repositories,
            catalog_filter,
            request,
            allow_archived=is_privileged(actor),
            max_page_size=config.max_page_size,
        )


def store_availability_counts(
    store_ids: Sequence[UUID],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> dict[UUID, StatusCounts]:
    with _factory(unit_of_work_factory)() as uow:
        return aggregate_availability(uow.repositories.availability, store_ids)


def moderate(
    decision: str,
    kind: EntityKind,
    entity_id: UUID,
    *,
    user_id: UUID | None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> actions.ModerationOutcome:
    """Apply an administrator decision (``approve``, ``reject`` or ``reviewed``)."""

    handlers = {
        "approve": actions.approve,
        "reject": actions.reject,
        "reviewed": actions.mark_reviewed,
    }
    handler = handlers.get(decision)
    if handler is None:
        raise ValueError(f"Unsupported moderation decision: {decision}")
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        return handler(uow, kind, entity_id, actor=actor)


def set_product_archived(
    product_id: UUID,
    *,
    archived: bool,
    user_id: UUID | None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        if archived:
            actions.archive_product(uow, product_id, actor=actor)
        else:
            actions.unarchive_product(uow, product_id, actor=actor)


def set_contributor_trust(
    contributor_id: UUID,
    *,
    trusted: bool,
    user_id: UUID | None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    with _factory(unit_of_work_factory)() as uow:
        actor = resolve_actor(uow.repositories, user_id)
        actions.set_trusted_contributor(uow, contributor_id, trusted=trusted, actor=actor)


def get_moderation_summary(
    *,
    user_id: UUID | None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> actions.ModerationSummary:
    with _factory(unit_of_work_factory)() as uow:
        actions.require_admin(resolve_actor(uow.repositories, user_id))
        return actions.moderation_summary(uow.repositories)
