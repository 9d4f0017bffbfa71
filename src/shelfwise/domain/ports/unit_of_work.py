"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from shelfwise.domain.ports.persistence import (
        AvailabilityRepository,
        BrandPageRepository,
        CityPageRepository,
        ContentEditRepository,
        ContributorRepository,
        ProductRepository,
        ReviewRepository,
        StoreRepository,
        UserProductRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...  # the repo list itself should be immutable

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories required by the moderation and catalog services."""

    contributors: ContributorRepository
    products: ProductRepository
    user_products: UserProductRepository
    stores: StoreRepository
    availability: AvailabilityRepository
    reviews: ReviewRepository
    city_pages: CityPageRepository
    brand_pages: BrandPageRepository
    content_edits: ContentEditRepository


type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
