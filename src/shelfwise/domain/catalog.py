"""Read-time resolution of logical catalog products.

A logical product id can be backed by three kinds of record. Exactly one is
authoritative per id, in priority order:

1. an approved shadow edit (a ``UserProduct`` whose ``source_product_id`` is the id)
2. the canonical ``Product`` with that id
3. an approved, purely user-originated ``UserProduct`` with that id

Nothing here is cached; every call re-reads the repositories.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal
from uuid import UUID

from shelfwise.config import DEFAULT_MAX_PAGE_SIZE, DEFAULT_PAGE_SIZE
from shelfwise.domain.errors import ForbiddenError, NotFoundError, ValidationError
from shelfwise.domain.model import ModerationStatus, effective_status
from shelfwise.domain.moderation.trust import is_privileged
from shelfwise.domain.ports import CatalogFilter

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from shelfwise.domain.model import Actor, Product, UserProduct
    from shelfwise.domain.ports import CatalogRepositories

log = logging.getLogger(__name__)


class EntrySource(StrEnum):
    CANONICAL = "canonical"
    OVERRIDE = "override"
    CONTRIBUTED = "contributed"


@dataclass(slots=True, frozen=True, kw_only=True)
class CanonicalEntry:
    """The bulk-imported record, not shadowed by any approved edit."""

    product: Product
    source: Literal[EntrySource.CANONICAL] = EntrySource.CANONICAL

    @property
    def logical_id(self) -> UUID:
        return self.product.id


@dataclass(slots=True, frozen=True, kw_only=True)
class OverrideEntry:
    """An approved shadow edit standing in for its canonical record."""

    product: UserProduct
    source: Literal[EntrySource.OVERRIDE] = EntrySource.OVERRIDE

    def __post_init__(self) -> None:
        if self.product.source_product_id is None:
            raise ValueError("Override entries require a shadow product")

    @property
    def logical_id(self) -> UUID:
        return self.product.logical_id


@dataclass(slots=True, frozen=True, kw_only=True)
class ContributedEntry:
    """A product that exists only as a user contribution."""

    product: UserProduct
    source: Literal[EntrySource.CONTRIBUTED] = EntrySource.CONTRIBUTED

    @property
    def logical_id(self) -> UUID:
        return self.product.id


type CatalogEntry = CanonicalEntry | OverrideEntry | ContributedEntry


class SortKey(StrEnum):
    NAME = "name"
    RATING = "rating"


@dataclass(slots=True, frozen=True)
class PageRequest:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort: SortKey = SortKey.NAME

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError(f"Page must be at least 1, got {self.page}")
        if self.page_size < 1:
            raise ValidationError(f"Page size must be at least 1, got {self.page_size}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(slots=True, frozen=True)
class RatingStats:
    average: float | None
    count: int
    distribution: dict[int, int] = field(default_factory=dict[int, int])

    @classmethod
    def from_ratings(cls, ratings: Sequence[int]) -> RatingStats:
        if not ratings:
            return cls(average=None, count=0)
        distribution: dict[int, int] = {}
        for rating in ratings:
            distribution[rating] = distribution.get(rating, 0) + 1
        average = round(sum(ratings) / len(ratings), 1)
        return cls(average=average, count=len(ratings), distribution=distribution)


@dataclass(slots=True, frozen=True, kw_only=True)
class CatalogSummary:
    logical_id: UUID
    record_id: UUID
    source: EntrySource
    name: str
    brand: str
    size_or_variant: str
    categories: tuple[str, ...] = ()
    image_url: str | None = None
    archived: bool = False
    rating: RatingStats = field(default_factory=lambda: RatingStats(average=None, count=0))

    @classmethod
    def from_entry(cls, entry: CatalogEntry, rating: RatingStats) -> CatalogSummary:
        product = entry.product
        return cls(
            logical_id=entry.logical_id,
            record_id=product.id,
            source=entry.source,
            name=product.name,
            brand=product.brand,
            size_or_variant=product.size_or_variant,
            categories=tuple(product.categories),
            image_url=product.image_url,
            archived=product.archived,
            rating=rating,
        )


@dataclass(slots=True, frozen=True)
class Page[T]:
    items: tuple[T, ...]
    page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def parse_id(value: str | UUID) -> UUID:
    """Parse a logical product id, rejecting malformed input."""

    if isinstance(value, UUID):
        return value
    try:
        return UUID(value.strip())
    except (ValueError, AttributeError) as exc:
        raise ValidationError(f"Malformed id: {value!r}") from exc


def _visible(product: Product | UserProduct, *, allow_archived: bool) -> bool:
    return allow_archived or not product.archived


def _is_authoritative_shadow(shadow: UserProduct | None, *, allow_archived: bool) -> bool:
    return (
        shadow is not None
        and effective_status(shadow) is ModerationStatus.APPROVED
        and _visible(shadow, allow_archived=allow_archived)
    )


def resolve_product(
    repositories: CatalogRepositories,
    logical_id: UUID,
    *,
    allow_archived: bool = False,
) -> CatalogEntry | None:
    """Return the authoritative record for ``logical_id``, or ``None``.

    Archived records only resolve for privileged callers (``allow_archived``).
    """

    shadow = repositories.user_products.find_shadow(logical_id)
    if shadow is not None and _is_authoritative_shadow(shadow, allow_archived=allow_archived):
        return OverrideEntry(product=shadow)

    product = repositories.products.get(logical_id)
    if product is not None and _visible(product, allow_archived=allow_archived):
        return CanonicalEntry(product=product)

    contributed = repositories.user_products.get(logical_id)
    if (
        contributed is not None
        and not contributed.is_shadow
        and effective_status(contributed) is ModerationStatus.APPROVED
        and _visible(contributed, allow_archived=allow_archived)
    ):
        return ContributedEntry(product=contributed)

    return None


def get_product(
    repositories: CatalogRepositories,
    logical_id: UUID,
    *,
    actor: Actor | None = None,
) -> CatalogEntry:
    """Resolve ``logical_id`` for ``actor``, raising when nothing is visible.

    Raises ``ForbiddenError`` when the product exists but is archived and the
    caller is not privileged, and ``NotFoundError`` otherwise.
    """

    privileged = is_privileged(actor)
    entry = resolve_product(repositories, logical_id, allow_archived=privileged)
    if entry is not None:
        return entry
    if not privileged and resolve_product(repositories, logical_id, allow_archived=True):
        raise ForbiddenError(f"Product {logical_id} is archived")
    raise NotFoundError(f"Product {logical_id} not found")


def _merge_entries(
    canonical: Sequence[Product],
    contributed: Sequence[UserProduct],
    shadows: dict[UUID, UserProduct],
    *,
    allow_archived: bool,
) -> list[CatalogEntry]:
    matching_contributed = {product.id for product in contributed}
    canonical_by_id = {product.id: product for product in canonical}
    shadowed_ids = {p.source_product_id for p in contributed if p.source_product_id is not None}

    entries: list[CatalogEntry] = []
    for canonical_id in canonical_by_id.keys() | shadowed_ids:
        shadow = shadows.get(canonical_id)
        if _is_authoritative_shadow(shadow, allow_archived=allow_archived):
            # the shadow wins; list it only if it matches the filter itself
            if shadow is not None and shadow.id in matching_contributed:
                entries.append(OverrideEntry(product=shadow))
            continue
        product = canonical_by_id.get(canonical_id)
        if product is not None:
            entries.append(CanonicalEntry(product=product))

    entries.extend(
        ContributedEntry(product=product) for product in contributed if not product.is_shadow
    )
    return entries


def _sort_key(
    sort: SortKey, ratings: dict[UUID, RatingStats]
) -> Callable[[CatalogEntry], tuple[object, ...]]:
    def by_name(entry: CatalogEntry) -> tuple[object, ...]:
        return (entry.product.name.casefold(), str(entry.logical_id))

    def by_rating(entry: CatalogEntry) -> tuple[object, ...]:
        stats = ratings.get(entry.logical_id)
        average = stats.average if stats is not None else None
        unrated = average is None
        return (unrated, -(average or 0.0), *by_name(entry))

    return by_rating if sort is SortKey.RATING else by_name


def _ratings_for(
    repositories: CatalogRepositories, logical_ids: Sequence[UUID]
) -> dict[UUID, RatingStats]:
    raw = repositories.reviews.approved_ratings(logical_ids)
    return {product_id: RatingStats.from_ratings(values) for product_id, values in raw.items()}


def list_catalog(
    repositories: CatalogRepositories,
    catalog_filter: CatalogFilter | None = None,
    page: PageRequest | None = None,
    *,
    allow_archived: bool = False,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> Page[CatalogSummary]:
    """Merge canonical and contributed products into one paginated listing.

    Shadowed canonical records are replaced by their shadow, so every logical
    id appears at most once. Sorting and pagination run on the merged sequence.
    """

    catalog_filter = catalog_filter or CatalogFilter()
    page = page or PageRequest()
    if page.page_size > max_page_size:
        raise ValidationError(f"Page size {page.page_size} exceeds maximum {max_page_size}")

    canonical = repositories.products.search(catalog_filter, include_archived=allow_archived)
    contributed = repositories.user_products.search_approved(
        catalog_filter, include_archived=allow_archived
    )
    candidate_ids = [product.id for product in canonical] + [
        product.source_product_id for product in contributed if product.source_product_id
    ]
    shadows = repositories.user_products.find_shadows(candidate_ids)
    entries = _merge_entries(canonical, contributed, shadows, allow_archived=allow_archived)

    logical_ids = [entry.logical_id for entry in entries]
    ratings = _ratings_for(repositories, logical_ids) if entries else {}
    entries.sort(key=_sort_key(page.sort, ratings))

    window = entries[page.offset : page.offset + page.page_size]
    empty = RatingStats(average=None, count=0)
    items = tuple(
        CatalogSummary.from_entry(entry, ratings.get(entry.logical_id, empty)) for entry in window
    )
    log.debug(
        "Catalog listing: %d canonical, %d contributed, %d merged, page %d",
        len(canonical),
        len(contributed),
        len(entries),
        page.page,
    )
    return Page(items=items, page=page.page, page_size=page.page_size, total_count=len(entries))


def rating_stats(repositories: CatalogRepositories, logical_id: UUID) -> RatingStats:
    """Average (one decimal), count and distribution of approved ratings."""

    ratings = repositories.reviews.approved_ratings([logical_id])
    return RatingStats.from_ratings(ratings.get(logical_id, []))
