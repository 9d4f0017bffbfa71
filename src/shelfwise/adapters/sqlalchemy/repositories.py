"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select

from shelfwise.adapters.sqlalchemy.mappings import (
    TABLE_BY_CLASS,
    availability_table,
    brand_page_table,
    city_page_table,
    content_edit_table,
    product_table,
    review_table,
    store_table,
    user_product_table,
)
from shelfwise.domain.model import (
    AvailabilityRecord,
    BrandPage,
    CityPage,
    ContentEditSuggestion,
    ContributedMixin,
    Contributor,
    Entity,
    EntityKind,
    ModerationStatus,
    Product,
    Review,
    Store,
    StoreType,
    UserProduct,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy import ColumnElement, Table
    from sqlalchemy.orm import Session

    from shelfwise.domain.ports import CatalogFilter


class SqlAlchemyRepository[TEntity: Entity]:
    """Shared add/get helpers keyed by primary key."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls
        self._table: Table = TABLE_BY_CLASS[entity_cls]

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)


class SqlAlchemyContributedRepository[TEntity: ContributedMixin](SqlAlchemyRepository[TEntity]):
    """Review-queue queries over the shared moderation columns."""

    def list_pending(self) -> Sequence[TEntity]:
        stmt = (
            select(self._entity_cls)
            .where(self._table.c.moderation_status == ModerationStatus.PENDING)
            .order_by(self._table.c.created_at)
        )
        return self.session.execute(stmt).scalars().all()

    def list_needing_review(self) -> Sequence[TEntity]:
        stmt = (
            select(self._entity_cls)
            .where(self._table.c.needs_review.is_(True))
            .order_by(self._table.c.created_at)
        )
        return self.session.execute(stmt).scalars().all()


def _approved(table: Table) -> ColumnElement[bool]:
    return or_(
        table.c.moderation_status == ModerationStatus.APPROVED,
        table.c.moderation_status.is_(None),
    )


def _not_rejected(table: Table) -> ColumnElement[bool]:
    return or_(
        table.c.moderation_status.is_(None),
        table.c.moderation_status != ModerationStatus.REJECTED,
    )


def _visible_availability() -> ColumnElement[bool]:
    """Confirmed or no status at all. Never "not pending and not rejected"."""

    return or_(
        availability_table.c.moderation_status == ModerationStatus.CONFIRMED,
        availability_table.c.moderation_status.is_(None),
    )


def _catalog_predicates(
    table: Table, catalog_filter: CatalogFilter, *, include_archived: bool
) -> list[ColumnElement[bool]]:
    predicates: list[ColumnElement[bool]] = []
    if not include_archived:
        predicates.append(table.c.archived.is_(False))
    if catalog_filter.query:
        predicates.append(
            or_(
                table.c.name.icontains(catalog_filter.query, autoescape=True),
                table.c.brand.icontains(catalog_filter.query, autoescape=True),
            )
        )
    if catalog_filter.brand:
        predicates.append(func.lower(table.c.brand) == catalog_filter.brand.lower())
    return predicates


def _matches_labels[TProduct: Product | UserProduct](
    items: Sequence[TProduct], catalog_filter: CatalogFilter
) -> list[TProduct]:
    # categories and tags are JSON lists; membership is checked in Python for portability
    category = catalog_filter.category.casefold() if catalog_filter.category else None
    tag = catalog_filter.tag.casefold() if catalog_filter.tag else None
    matched: list[TProduct] = []
    for item in items:
        if category is not None and category not in {c.casefold() for c in item.categories}:
            continue
        if tag is not None and tag not in {t.casefold() for t in item.tags}:
            continue
        matched.append(item)
    return matched


class SqlAlchemyContributorRepository(SqlAlchemyRepository[Contributor]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Contributor)


class SqlAlchemyProductRepository(SqlAlchemyRepository[Product]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Product)

    def search(
        self, catalog_filter: CatalogFilter, *, include_archived: bool
    ) -> Sequence[Product]:
        stmt = select(Product).where(
            *_catalog_predicates(product_table, catalog_filter, include_archived=include_archived)
        )
        return _matches_labels(self.session.execute(stmt).scalars().all(), catalog_filter)

    def find_brand(self, brand: str) -> str | None:
        stmt = (
            select(product_table.c.brand)
            .where(func.lower(product_table.c.brand) == brand.strip().lower())
            .where(product_table.c.archived.is_(False))
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyUserProductRepository(SqlAlchemyContributedRepository[UserProduct]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, UserProduct)

    def find_shadow(self, source_product_id: UUID) -> UserProduct | None:
        stmt = (
            select(UserProduct)
            .where(user_product_table.c.source_product_id == source_product_id)
            .where(_not_rejected(user_product_table))
            .order_by(user_product_table.c.created_at.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_shadows(self, source_product_ids: Sequence[UUID]) -> dict[UUID, UserProduct]:
        if not source_product_ids:
            return {}
        stmt = (
            select(UserProduct)
            .where(user_product_table.c.source_product_id.in_(source_product_ids))
            .where(_not_rejected(user_product_table))
            .order_by(user_product_table.c.created_at)
        )
        shadows: dict[UUID, UserProduct] = {}
        for shadow in self.session.execute(stmt).scalars():
            if shadow.source_product_id is not None:
                shadows[shadow.source_product_id] = shadow  # newest wins
        return shadows

    def search_approved(
        self, catalog_filter: CatalogFilter, *, include_archived: bool
    ) -> Sequence[UserProduct]:
        stmt = (
            select(UserProduct)
            .where(_approved(user_product_table))
            .where(
                *_catalog_predicates(
                    user_product_table, catalog_filter, include_archived=include_archived
                )
            )
        )
        return _matches_labels(self.session.execute(stmt).scalars().all(), catalog_filter)

    def find_brand(self, brand: str) -> str | None:
        stmt = (
            select(user_product_table.c.brand)
            .where(func.lower(user_product_table.c.brand) == brand.strip().lower())
            .where(user_product_table.c.archived.is_(False))
            .where(_approved(user_product_table))
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()



class SqlAlchemyStoreRepository(SqlAlchemyContributedRepository[Store]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Store)

    def find_by_place_id(self, place_id: str) -> Store | None:
        stmt = (
            select(Store)
            .where(store_table.c.place_id == place_id)
            .where(_not_rejected(store_table))
            .order_by(store_table.c.created_at)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_name(
        self, name: str, *, store_type: StoreType | None = None, limit: int | None = None
    ) -> Sequence[Store]:
        stmt = (
            select(Store)
            .where(func.lower(store_table.c.name) == name.strip().lower())
            .where(_not_rejected(store_table))
            .order_by(store_table.c.created_at)
        )
        if store_type is not None:
            stmt = stmt.where(store_table.c.store_type == store_type)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyAvailabilityRepository(SqlAlchemyContributedRepository[AvailabilityRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, AvailabilityRecord)

    def find(self, product_id: UUID, store_id: UUID) -> AvailabilityRecord | None:
        stmt = (
            select(AvailabilityRecord)
            .where(availability_table.c.product_id == product_id)
            .where(availability_table.c.store_id == store_id)
            .order_by(availability_table.c.created_at)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_stores(self, store_ids: Sequence[UUID]) -> Sequence[AvailabilityRecord]:
        if not store_ids:
            return []
        stmt = (
            select(AvailabilityRecord)
            .where(availability_table.c.store_id.in_(store_ids))
            .order_by(availability_table.c.created_at, availability_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def list_for_product(self, product_id: UUID) -> Sequence[AvailabilityRecord]:
        stmt = (
            select(AvailabilityRecord)
            .where(availability_table.c.product_id == product_id)
            .order_by(availability_table.c.last_confirmed_at.desc())
        )
        return self.session.execute(stmt).scalars().all()

    def visible_product_ids(self, store_id: UUID) -> Sequence[UUID]:
        stmt = (
            select(availability_table.c.product_id)
            .where(availability_table.c.store_id == store_id)
            .where(_visible_availability())
            .distinct()
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyReviewRepository(SqlAlchemyContributedRepository[Review]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Review)

    def find_by_author(self, product_id: UUID, user_id: UUID) -> Review | None:
        stmt = (
            select(Review)
            .where(review_table.c.product_id == product_id)
            .where(review_table.c.created_by == user_id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def approved_ratings(self, product_ids: Sequence[UUID]) -> dict[UUID, list[int]]:
        ratings: dict[UUID, list[int]] = defaultdict(list)
        if not product_ids:
            return ratings
        stmt = (
            select(review_table.c.product_id, review_table.c.rating)
            .where(review_table.c.product_id.in_(product_ids))
            .where(_approved(review_table))
        )
        for product_id, rating in self.session.execute(stmt):
            ratings[product_id].append(rating)
        return ratings


class SqlAlchemyCityPageRepository(SqlAlchemyRepository[CityPage]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, CityPage)

    def get_by_slug(self, slug: str) -> CityPage | None:
        stmt = select(CityPage).where(city_page_table.c.slug == slug.strip().lower())
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyBrandPageRepository(SqlAlchemyRepository[BrandPage]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, BrandPage)

    def get_by_slug(self, slug: str) -> BrandPage | None:
        stmt = select(BrandPage).where(brand_page_table.c.slug == slug.strip().lower())
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyContentEditRepository(SqlAlchemyContributedRepository[ContentEditSuggestion]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ContentEditSuggestion)

    def list_for_target(
        self, target_kind: EntityKind, target_key: str
    ) -> Sequence[ContentEditSuggestion]:
        stmt = (
            select(ContentEditSuggestion)
            .where(content_edit_table.c.target_kind == target_kind)
            .where(content_edit_table.c.target_key == target_key)
            .order_by(content_edit_table.c.created_at)
        )
        return self.session.execute(stmt).scalars().all()
