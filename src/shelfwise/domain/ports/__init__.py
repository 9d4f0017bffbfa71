"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    AvailabilityRepository,
    BrandPageRepository,
    CatalogFilter,
    CityPageRepository,
    ContentEditRepository,
    ContributedRepository,
    ContributorRepository,
    ProductRepository,
    Repository,
    ReviewRepository,
    StoreRepository,
    UserProductRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AvailabilityRepository",
    "BrandPageRepository",
    "CatalogFilter",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CityPageRepository",
    "ContentEditRepository",
    "ContributedRepository",
    "ContributorRepository",
    "ProductRepository",
    "Repository",
    "RepositoryCollection",
    "ReviewRepository",
    "StoreRepository",
    "UnitOfWork",
    "UserProductRepository",
]
