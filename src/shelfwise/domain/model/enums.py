"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class TrustTier(StrEnum):
    """Default trust granted to a contributor; derived per call, never stored."""

    REGULAR = "regular"
    TRUSTED = "trusted"
    FULLY_TRUSTED = "fully_trusted"


class ModerationStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class EntityKind(StrEnum):
    """Discriminator for contributed and editable entities."""

    PRODUCT = "product"
    USER_PRODUCT = "user_product"
    STORE = "store"
    AVAILABILITY = "availability"
    REVIEW = "review"
    CITY_PAGE = "city_page"
    BRAND_PAGE = "brand_page"
    CONTENT_EDIT = "content_edit"
    CONTRIBUTOR = "contributor"


class StoreType(StrEnum):
    BRICK_AND_MORTAR = "brick_and_mortar"
    ONLINE_RETAILER = "online_retailer"
    BRAND_DIRECT = "brand_direct"


class AvailabilitySource(StrEnum):
    SEED_DATA = "seed_data"
    USER_CONTRIBUTION = "user_contribution"


# Stores and availability facts are "confirmed" when live; everything else is "approved".
_CONFIRMED_KINDS = frozenset({EntityKind.STORE, EntityKind.AVAILABILITY})


def live_status_for(kind: EntityKind) -> ModerationStatus:
    """Return the status label a live entity of ``kind`` carries."""

    if kind in _CONFIRMED_KINDS:
        return ModerationStatus.CONFIRMED
    return ModerationStatus.APPROVED


def is_live(status: ModerationStatus) -> bool:
    return status in {ModerationStatus.APPROVED, ModerationStatus.CONFIRMED}
