"""New-entity contributions: products, stores, availability reports, reviews.

Each path classifies the caller, asks the moderation policy for the initial
status and persists the entity with it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shelfwise.config import DEFAULT_SIMILAR_STORE_LIMIT
from shelfwise.domain.catalog import resolve_product
from shelfwise.domain.duplicates import check_duplicate_store
from shelfwise.domain.errors import (
    ConflictError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from shelfwise.domain.model import (
    AvailabilityRecord,
    AvailabilitySource,
    ContributedMixin,
    EntityKind,
    ModerationStatus,
    Review,
    UserProduct,
    effective_status,
)
from shelfwise.domain.moderation.policy import (
    StatusDecision,
    decide_new_entity_status,
    submission_message,
)
from shelfwise.domain.moderation.trust import classify

if TYPE_CHECKING:
    from uuid import UUID

    from shelfwise.domain.duplicates import StoreCandidate
    from shelfwise.domain.model import Actor
    from shelfwise.domain.ports import CatalogUnitOfWork

log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class ProductDraft:
    name: str
    brand: str
    size_or_variant: str
    description: str | None = None
    categories: list[str] = field(default_factory=list[str])
    tags: list[str] = field(default_factory=list[str])
    image_url: str | None = None
    nutrition_summary: str | None = None
    ingredient_summary: str | None = None

    def __post_init__(self) -> None:
        for name in ("name", "brand", "size_or_variant"):
            if not getattr(self, name).strip():
                raise ValidationError(f"Product {name} must not be blank")


@dataclass(slots=True, frozen=True)
class SubmissionResult:
    entity_id: UUID
    kind: EntityKind
    status: ModerationStatus
    needs_review: bool
    message: str


def _require_actor(actor: Actor | None) -> Actor:
    if actor is None:
        raise UnauthenticatedError("Sign in to contribute")
    return actor


def _stamp(entity: ContributedMixin, decision: StatusDecision, actor: Actor) -> None:
    entity.moderation_status = decision.status
    entity.needs_review = decision.needs_review
    entity.trusted_contribution = decision.trusted_contribution
    entity.created_by = actor.user_id


def _result(entity: ContributedMixin, decision: StatusDecision) -> SubmissionResult:
    log.info(
        "New %s %s by %s: %s (needs_review=%s)",
        entity.ENTITY_KIND,
        entity.id,
        entity.created_by,
        decision.status,
        decision.needs_review,
    )
    return SubmissionResult(
        entity_id=entity.id,
        kind=entity.ENTITY_KIND,
        status=decision.status,
        needs_review=decision.needs_review,
        message=submission_message(decision.tier),
    )


def submit_product(
    uow: CatalogUnitOfWork, draft: ProductDraft, *, actor: Actor | None
) -> SubmissionResult:
    actor = _require_actor(actor)
    decision = decide_new_entity_status(classify(actor), EntityKind.USER_PRODUCT)
    product = UserProduct(
        name=draft.name.strip(),
        brand=draft.brand.strip(),
        size_or_variant=draft.size_or_variant.strip(),
        description=draft.description,
        categories=list(draft.categories),
        tags=list(draft.tags),
        image_url=draft.image_url,
        nutrition_summary=draft.nutrition_summary,
        ingredient_summary=draft.ingredient_summary,
    )
    _stamp(product, decision, actor)
    uow.repositories.user_products.add(product)
    uow.commit()
    return _result(product, decision)


def submit_store(
    uow: CatalogUnitOfWork,
    candidate: StoreCandidate,
    *,
    actor: Actor | None,
    allow_similar: bool = False,
    similar_limit: int = DEFAULT_SIMILAR_STORE_LIMIT,
) -> SubmissionResult:
    """Create a store unless it duplicates an existing one.

    An exact match always blocks creation. Similar stores block it unless the
    caller passes ``allow_similar`` after showing them to the user.
    """

    actor = _require_actor(actor)
    stores = uow.repositories.stores
    check = check_duplicate_store(stores, candidate, similar_limit=similar_limit)
    if check.exact_match is not None:
        raise ConflictError(
            f"Store {candidate.name!r} already exists",
            existing=check.exact_match,
        )
    if check.similar_stores and not allow_similar:
        raise ConflictError(
            f"{len(check.similar_stores)} similar store(s) found for {candidate.name!r}",
            similar=check.similar_stores,
        )

    decision = decide_new_entity_status(classify(actor), EntityKind.STORE)
    store = candidate.to_store()
    _stamp(store, decision, actor)
    stores.add(store)
    uow.commit()
    return _result(store, decision)


def report_availability(
    uow: CatalogUnitOfWork,
    product_id: UUID,
    store_id: UUID,
    *,
    actor: Actor | None,
    price_range: str | None = None,
) -> SubmissionResult:
    actor = _require_actor(actor)
    repositories = uow.repositories
    if resolve_product(repositories, product_id) is None:
        raise NotFoundError(f"Product {product_id} not found")
    store = repositories.stores.get(store_id)
    if store is None or effective_status(store) is ModerationStatus.REJECTED:
        raise NotFoundError(f"Store {store_id} not found")
    existing = repositories.availability.find(product_id, store_id)
    if existing is not None:
        raise ConflictError(
            f"Availability for product {product_id} at store {store_id} already reported",
            existing=existing,
        )

    decision = decide_new_entity_status(classify(actor), EntityKind.AVAILABILITY)
    record = AvailabilityRecord(
        product_id=product_id,
        store_id=store_id,
        source=AvailabilitySource.USER_CONTRIBUTION,
        price_range=price_range.strip() if price_range else None,
    )
    _stamp(record, decision, actor)
    repositories.availability.add(record)
    uow.commit()
    return _result(record, decision)


def submit_review(
    uow: CatalogUnitOfWork,
    product_id: UUID,
    *,
    actor: Actor | None,
    rating: int,
    comment: str,
    title: str | None = None,
) -> SubmissionResult:
    actor = _require_actor(actor)
    repositories = uow.repositories
    if resolve_product(repositories, product_id) is None:
        raise NotFoundError(f"Product {product_id} not found")
    if repositories.reviews.find_by_author(product_id, actor.user_id) is not None:
        raise ConflictError(f"You have already reviewed product {product_id}")

    decision = decide_new_entity_status(classify(actor), EntityKind.REVIEW)
    review = Review(
        product_id=product_id,
        rating=rating,
        comment=comment.strip(),
        title=title.strip() if title else None,
    )
    _stamp(review, decision, actor)
    repositories.reviews.add(review)
    uow.commit()
    return _result(review, decision)
