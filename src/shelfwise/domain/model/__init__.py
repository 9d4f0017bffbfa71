"""Public domain model surface."""

from __future__ import annotations

from shelfwise.domain.model.base import (
    ArchivableMixin,
    ContributedMixin,
    Entity,
    effective_status,
    new_id,
    utcnow,
)
from shelfwise.domain.model.catalog import (
    PRODUCT_CONTENT_FIELDS,
    Product,
    ProductContent,
    UserProduct,
)
from shelfwise.domain.model.contributor import Actor, Contributor
from shelfwise.domain.model.edits import ContentEditSuggestion
from shelfwise.domain.model.enums import (
    AvailabilitySource,
    EntityKind,
    ModerationStatus,
    Role,
    StoreType,
    TrustTier,
    is_live,
    live_status_for,
)
from shelfwise.domain.model.pages import BrandPage, CityPage, slugify
from shelfwise.domain.model.reviews import MAX_RATING, MIN_RATING, Review
from shelfwise.domain.model.stores import AvailabilityRecord, Store

__all__ = [  # noqa: RUF022
    # base
    "ArchivableMixin",
    "ContributedMixin",
    "Entity",
    "effective_status",
    "new_id",
    "utcnow",
    # enums
    "AvailabilitySource",
    "EntityKind",
    "ModerationStatus",
    "Role",
    "StoreType",
    "TrustTier",
    "is_live",
    "live_status_for",
    # entities
    "Actor",
    "AvailabilityRecord",
    "BrandPage",
    "CityPage",
    "ContentEditSuggestion",
    "Contributor",
    "PRODUCT_CONTENT_FIELDS",
    "Product",
    "ProductContent",
    "Review",
    "Store",
    "UserProduct",
    "MAX_RATING",
    "MIN_RATING",
    "slugify",
]
