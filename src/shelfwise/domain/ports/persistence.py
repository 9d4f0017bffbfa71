"""Ports for persisting catalog and moderation records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from shelfwise.domain.model import (
    AvailabilityRecord,
    BrandPage,
    CityPage,
    ContentEditSuggestion,
    Contributor,
    EntityKind,
    Product,
    Review,
    Store,
    StoreType,
    UserProduct,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


@dataclass(slots=True, frozen=True)
class CatalogFilter:
    """Listing filter; every criterion is optional and matched case-insensitively."""

    query: str | None = None
    brand: str | None = None
    category: str | None = None
    tag: str | None = None


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent record store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class ContributedRepository[TEntity](Repository[TEntity], Protocol):
    """Review-queue queries shared by every contributed kind."""

    def list_pending(self) -> Sequence[TEntity]: ...

    def list_needing_review(self) -> Sequence[TEntity]: ...


@runtime_checkable
class ContributorRepository(Repository[Contributor], Protocol):
    """Repository contract for contributors."""


@runtime_checkable
class ProductRepository(Repository[Product], Protocol):
    """Canonical catalog records."""

    def search(
        self, catalog_filter: CatalogFilter, *, include_archived: bool
    ) -> Sequence[Product]: ...

    def find_brand(self, brand: str) -> str | None:
        """Return the stored spelling of ``brand`` on a non-archived product, if any."""
        ...


@runtime_checkable
class UserProductRepository(ContributedRepository[UserProduct], Protocol):
    """User-contributed products, including shadow edits of canonical products."""

    def find_shadow(self, source_product_id: UUID) -> UserProduct | None:
        """Return the newest non-rejected shadow of a canonical product."""
        ...

    def find_shadows(self, source_product_ids: Sequence[UUID]) -> dict[UUID, UserProduct]:
        """Newest non-rejected shadow per canonical id, for ids that have one."""
        ...

    def search_approved(
        self, catalog_filter: CatalogFilter, *, include_archived: bool
    ) -> Sequence[UserProduct]: ...

    def find_brand(self, brand: str) -> str | None: ...


@runtime_checkable
class StoreRepository(ContributedRepository[Store], Protocol):
    def find_by_place_id(self, place_id: str) -> Store | None:
        """Return a non-rejected store with this external place id."""
        ...

    def find_by_name(
        self, name: str, *, store_type: StoreType | None = None, limit: int | None = None
    ) -> Sequence[Store]:
        """Return non-rejected stores whose name matches case-insensitively."""
        ...


@runtime_checkable
class AvailabilityRepository(ContributedRepository[AvailabilityRecord], Protocol):
    def find(self, product_id: UUID, store_id: UUID) -> AvailabilityRecord | None: ...

    def list_for_stores(self, store_ids: Sequence[UUID]) -> Sequence[AvailabilityRecord]:
        """Return records at any of ``store_ids``, oldest first."""
        ...

    def list_for_product(self, product_id: UUID) -> Sequence[AvailabilityRecord]: ...

    def visible_product_ids(self, store_id: UUID) -> Sequence[UUID]:
        """Product ids whose record at ``store_id`` is confirmed or has no status."""
        ...


@runtime_checkable
class ReviewRepository(ContributedRepository[Review], Protocol):
    def find_by_author(self, product_id: UUID, user_id: UUID) -> Review | None: ...

    def approved_ratings(self, product_ids: Sequence[UUID]) -> dict[UUID, list[int]]: ...


@runtime_checkable
class CityPageRepository(Repository[CityPage], Protocol):
    def get_by_slug(self, slug: str) -> CityPage | None: ...


@runtime_checkable
class BrandPageRepository(Repository[BrandPage], Protocol):
    def get_by_slug(self, slug: str) -> BrandPage | None: ...


@runtime_checkable
class ContentEditRepository(ContributedRepository[ContentEditSuggestion], Protocol):
    def list_for_target(
        self, target_kind: EntityKind, target_key: str
    ) -> Sequence[ContentEditSuggestion]: ...
