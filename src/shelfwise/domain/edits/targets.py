"""Editable targets: which fields may change and where the value lives."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from shelfwise.domain.catalog import get_product, parse_id
from shelfwise.domain.errors import NotFoundError, ValidationError
from shelfwise.domain.model import (
    BrandPage,
    CityPage,
    EntityKind,
    Product,
    Store,
    UserProduct,
    slugify,
    utcnow,
)

if TYPE_CHECKING:
    from uuid import UUID

    from shelfwise.domain.model import Actor
    from shelfwise.domain.moderation.policy import EditDecision
    from shelfwise.domain.ports import CatalogRepositories

log = logging.getLogger(__name__)

type EditableRecord = CityPage | BrandPage | Store | Product | UserProduct

EDITABLE_FIELDS: Final[dict[EntityKind, frozenset[str]]] = {
    EntityKind.CITY_PAGE: frozenset({"city_name", "headline", "description"}),
    EntityKind.BRAND_PAGE: frozenset({"display_name", "description", "website_url"}),
    EntityKind.STORE: frozenset({"name", "description", "website_url"}),
    EntityKind.PRODUCT: frozenset(
        {
            "name",
            "brand",
            "description",
            "size_or_variant",
            "image_url",
            "nutrition_summary",
            "ingredient_summary",
        }
    ),
}

REQUIRED_FIELDS: Final[dict[EntityKind, frozenset[str]]] = {
    EntityKind.CITY_PAGE: frozenset({"city_name", "headline"}),
    EntityKind.BRAND_PAGE: frozenset({"display_name"}),
    EntityKind.STORE: frozenset({"name"}),
    EntityKind.PRODUCT: frozenset({"name", "brand", "size_or_variant"}),
}


@dataclass(slots=True, frozen=True)
class EditTargetRef:
    """Reference to an editable entity.

    ``key`` is a slug for city pages, the brand name for brand pages and the
    id for stores and products.
    """

    kind: EntityKind
    key: str

    def __post_init__(self) -> None:
        if self.kind not in EDITABLE_FIELDS:
            raise ValidationError(f"{self.kind} does not accept content edits")
        if not self.key.strip():
            raise ValidationError("Edit target key must not be blank")

    @classmethod
    def city(cls, slug: str) -> EditTargetRef:
        return cls(EntityKind.CITY_PAGE, slug)

    @classmethod
    def brand(cls, brand_name: str) -> EditTargetRef:
        return cls(EntityKind.BRAND_PAGE, brand_name)

    @classmethod
    def store(cls, store_id: UUID | str) -> EditTargetRef:
        return cls(EntityKind.STORE, str(store_id))

    @classmethod
    def product(cls, product_id: UUID | str) -> EditTargetRef:
        return cls(EntityKind.PRODUCT, str(product_id))

    @property
    def ledger_key(self) -> str:
        """Stable key stored on ledger rows for this target."""

        if self.kind in {EntityKind.CITY_PAGE, EntityKind.BRAND_PAGE}:
            return slugify(self.key)
        return str(parse_id(self.key))

    def check_field(self, field_name: str) -> None:
        if field_name not in EDITABLE_FIELDS[self.kind]:
            allowed = ", ".join(sorted(EDITABLE_FIELDS[self.kind]))
            raise ValidationError(
                f"Field {field_name!r} cannot be edited on {self.kind}; allowed: {allowed}"
            )


def normalize_value(value: str | None) -> str | None:
    """Trim whitespace; an empty value is an explicit clear."""

    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(slots=True)
class LoadedTarget:
    """An edit target read for one ``submit_edit`` call.

    ``record`` is the entity currently holding the displayed value. For a
    canonical product that is the canonical record itself, which is never written.
    """

    ref: EditTargetRef
    record: EditableRecord
    target_id: UUID

    def current_value(self, field_name: str) -> str | None:
        return normalize_value(getattr(self.record, field_name))


def load_target(
    repositories: CatalogRepositories,
    ref: EditTargetRef,
    *,
    actor: Actor | None = None,
) -> LoadedTarget:
    """Read the target, materializing a brand page from catalog evidence if needed."""

    if ref.kind is EntityKind.CITY_PAGE:
        page = repositories.city_pages.get_by_slug(ref.ledger_key)
        if page is None:
            raise NotFoundError(f"City page {ref.key!r} not found")
        return LoadedTarget(ref=ref, record=page, target_id=page.id)

    if ref.kind is EntityKind.BRAND_PAGE:
        return _load_brand_page(repositories, ref, actor=actor)

    if ref.kind is EntityKind.STORE:
        store = repositories.stores.get(parse_id(ref.key))
        if store is None:
            raise NotFoundError(f"Store {ref.key} not found")
        return LoadedTarget(ref=ref, record=store, target_id=store.id)

    entry = get_product(repositories, parse_id(ref.key), actor=actor)
    return LoadedTarget(ref=ref, record=entry.product, target_id=entry.logical_id)


def _load_brand_page(
    repositories: CatalogRepositories,
    ref: EditTargetRef,
    *,
    actor: Actor | None,
) -> LoadedTarget:
    page = repositories.brand_pages.get_by_slug(ref.ledger_key)
    if page is not None:
        return LoadedTarget(ref=ref, record=page, target_id=page.id)

    brand_name = repositories.products.find_brand(ref.key)
    if brand_name is None:
        brand_name = repositories.user_products.find_brand(ref.key)
    if brand_name is None:
        raise NotFoundError(f"No catalog products carry brand {ref.key!r}")
    page = BrandPage.for_brand(brand_name, created_by=actor.user_id if actor else None)
    repositories.brand_pages.add(page)
    log.info("Materialized brand page %r for %r", page.slug, brand_name)
    return LoadedTarget(ref=ref, record=page, target_id=page.id)


def write_value(
    repositories: CatalogRepositories,
    target: LoadedTarget,
    field_name: str,
    value: str | None,
    *,
    actor: Actor,
    decision: EditDecision,
) -> EditableRecord:
    """Write ``value`` to the target and return the record that now holds it.

    Canonical products are never mutated: the value lands on a new shadow that
    copies every canonical field. Shadows and user-originated products are
    updated in place.
    """

    record = target.record
    if isinstance(record, Product):
        shadow = UserProduct.shadow_of(record, created_by=actor.user_id)
        shadow.moderation_status = decision.status
        shadow.trusted_contribution = True
        shadow.needs_review = decision.needs_review
        setattr(shadow, field_name, value)
        repositories.user_products.add(shadow)
        log.info("Created shadow %s for canonical product %s", shadow.id, record.id)
        target.record = shadow
        return shadow

    setattr(record, field_name, value)
    if isinstance(record, UserProduct | Store):
        # pending records are already queued; the flag is for live content only
        if record.is_live:
            record.needs_review = record.needs_review or decision.needs_review
    elif isinstance(record, CityPage | BrandPage):
        record.updated_by = actor.user_id
        record.updated_at = utcnow()
    return record

