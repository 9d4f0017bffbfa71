"""Catalog products: bulk-imported canonical records and user contributions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from shelfwise.domain.model.base import ArchivableMixin, ContributedMixin, Entity
from shelfwise.domain.model.enums import EntityKind

if TYPE_CHECKING:
    from uuid import UUID

PRODUCT_CONTENT_FIELDS: tuple[str, ...] = (
    "name",
    "brand",
    "description",
    "size_or_variant",
    "categories",
    "tags",
    "image_url",
    "nutrition_summary",
    "ingredient_summary",
)


@dataclass(eq=False, kw_only=True)
class ProductContent(Entity):
    """Descriptive fields shared by canonical and user-contributed products."""

    name: str
    brand: str
    size_or_variant: str
    description: str | None = None
    categories: list[str] = field(default_factory=list[str])
    tags: list[str] = field(default_factory=list[str])
    image_url: str | None = None
    nutrition_summary: str | None = None
    ingredient_summary: str | None = None


@dataclass(eq=False, kw_only=True)
class Product(ProductContent, ArchivableMixin):
    """Canonical record from the bulk catalog. Never mutated by contributor edits."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PRODUCT


@dataclass(eq=False, kw_only=True)
class UserProduct(ProductContent, ContributedMixin, ArchivableMixin):
    """User-contributed product.

    With ``source_product_id`` set it is a shadow edit overriding that canonical
    product at read time; without it the product exists only as a contribution.
    """

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.USER_PRODUCT

    source_product_id: UUID | None = None

    @property
    def is_shadow(self) -> bool:
        return self.source_product_id is not None

    @property
    def logical_id(self) -> UUID:
        return self.source_product_id or self.id

    @classmethod
    def shadow_of(cls, product: Product, *, created_by: UUID | None = None) -> UserProduct:
        """Copy every content field of ``product`` into a new shadow record."""

        return cls(
            name=product.name,
            brand=product.brand,
            size_or_variant=product.size_or_variant,
            description=product.description,
            categories=list(product.categories),
            tags=list(product.tags),
            image_url=product.image_url,
            nutrition_summary=product.nutrition_summary,
            ingredient_summary=product.ingredient_summary,
            source_product_id=product.id,
            created_by=created_by,
        )
