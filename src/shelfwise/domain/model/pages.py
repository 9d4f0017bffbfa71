"""Editorial landing pages for cities and brands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from shelfwise.domain.model.base import Entity
from shelfwise.domain.model.enums import EntityKind

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase, collapse non-alphanumerics into ``-``, strip edge dashes."""

    return _NON_SLUG_CHARS.sub("-", value.lower()).strip("-")


@dataclass(eq=False, kw_only=True)
class CityPage(Entity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CITY_PAGE

    slug: str
    city_name: str
    state: str
    headline: str
    description: str | None = None
    is_active: bool = True
    updated_by: UUID | None = None
    updated_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class BrandPage(Entity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.BRAND_PAGE

    brand_name: str
    slug: str
    display_name: str
    description: str | None = None
    website_url: str | None = None
    logo_url: str | None = None
    is_active: bool = True
    created_by: UUID | None = None
    updated_by: UUID | None = None
    updated_at: datetime | None = None

    @classmethod
    def for_brand(cls, brand_name: str, *, created_by: UUID | None = None) -> BrandPage:
        return cls(
            brand_name=brand_name,
            slug=slugify(brand_name),
            display_name=brand_name,
            created_by=created_by,
        )
