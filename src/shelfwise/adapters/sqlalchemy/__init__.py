"""SQLAlchemy adapter package for Shelfwise."""

from __future__ import annotations

from .mappings import TABLE_BY_CLASS, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAvailabilityRepository,
    SqlAlchemyBrandPageRepository,
    SqlAlchemyCityPageRepository,
    SqlAlchemyContentEditRepository,
    SqlAlchemyContributorRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyReviewRepository,
    SqlAlchemyStoreRepository,
    SqlAlchemyUserProductRepository,
)
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, is_started, shutdown, startup

__all__ = [
    "TABLE_BY_CLASS",
    "SqlAlchemyAvailabilityRepository",
    "SqlAlchemyBrandPageRepository",
    "SqlAlchemyCityPageRepository",
    "SqlAlchemyContentEditRepository",
    "SqlAlchemyContributorRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyReviewRepository",
    "SqlAlchemyStoreRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyUserProductRepository",
    "StartupError",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
