"""Retail locations and the availability facts linking them to products."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from shelfwise.domain.model.base import ContributedMixin, utcnow
from shelfwise.domain.model.enums import AvailabilitySource, EntityKind, StoreType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Store(ContributedMixin):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.STORE

    name: str
    store_type: StoreType = StoreType.BRICK_AND_MORTAR
    region_or_scope: str = "local"
    description: str | None = None
    website_url: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str = "US"
    place_id: str | None = None
    phone_number: str | None = None

    @property
    def is_physical(self) -> bool:
        return self.store_type is StoreType.BRICK_AND_MORTAR


@dataclass(eq=False, kw_only=True)
class AvailabilityRecord(ContributedMixin):
    """A product reported as stocked at a store.

    ``product_id`` is the logical catalog id (canonical or user-originated).
    """

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.AVAILABILITY

    product_id: UUID
    store_id: UUID
    source: AvailabilitySource = AvailabilitySource.USER_CONTRIBUTION
    price_range: str | None = None
    last_confirmed_at: datetime = field(default_factory=utcnow)
