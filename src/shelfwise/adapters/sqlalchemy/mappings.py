"""SQLAlchemy mapping metadata for the Shelfwise domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Final

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from shelfwise.domain.model import (
    AvailabilityRecord,
    AvailabilitySource,
    BrandPage,
    CityPage,
    ContentEditSuggestion,
    Contributor,
    Entity,
    EntityKind,
    ModerationStatus,
    Product,
    Review,
    Role,
    Store,
    StoreType,
    UserProduct,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _moderation_columns() -> list[Column[object]]:
    return [
        Column("moderation_status", Enum(ModerationStatus, native_enum=False), nullable=True),
        Column("trusted_contribution", Boolean, nullable=False, default=False),
        Column("needs_review", Boolean, nullable=False, default=False),
        Column("created_by", UUIDColumnType, nullable=True),
        Column("created_at", UTCDateTime(), nullable=False),
        Column("reviewed_by", UUIDColumnType, nullable=True),
        Column("reviewed_at", UTCDateTime(), nullable=True),
    ]


def _archive_columns() -> list[Column[object]]:
    return [
        Column("archived", Boolean, nullable=False, default=False),
        Column("archived_at", UTCDateTime(), nullable=True),
        Column("archived_by", UUIDColumnType, nullable=True),
    ]


def _product_content_columns() -> list[Column[object]]:
    return [
        Column("name", String, nullable=False),
        Column("brand", String, nullable=False),
        Column("size_or_variant", String, nullable=False),
        Column("description", Text, nullable=True),
        Column("categories", JSON, nullable=False, default=list),
        Column("tags", JSON, nullable=False, default=list),
        Column("image_url", String, nullable=True),
        Column("nutrition_summary", Text, nullable=True),
        Column("ingredient_summary", Text, nullable=True),
    ]


# Core tables -----------------------------------------------------------------

contributor_table = Table(
    "contributor",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("display_name", String, nullable=False),
    Column("email", String, nullable=True),
    Column("role", Enum(Role, native_enum=False), nullable=False),
    Column("trusted_contributor", Boolean, nullable=False, default=False),
    Column("trusted_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    *_product_content_columns(),
    *_archive_columns(),
    Index("ix_product_brand", "brand"),
)

user_product_table = Table(
    "user_product",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    *_product_content_columns(),
    Column("source_product_id", UUIDColumnType, ForeignKey("product.id"), nullable=True),
    *_moderation_columns(),
    *_archive_columns(),
    Index("ix_user_product_source_product_id", "source_product_id"),
    Index("ix_user_product_moderation_status", "moderation_status"),
)

store_table = Table(
    "store",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("store_type", Enum(StoreType, native_enum=False), nullable=False),
    Column("region_or_scope", String, nullable=False),
    Column("description", Text, nullable=True),
    Column("website_url", String, nullable=True),
    Column("address", String, nullable=True),
    Column("city", String, nullable=True),
    Column("state", String, nullable=True),
    Column("zip_code", String, nullable=True),
    Column("country", String, nullable=False),
    Column("place_id", String, nullable=True),
    Column("phone_number", String, nullable=True),
    *_moderation_columns(),
    Index("ix_store_place_id", "place_id"),
    Index("ix_store_name", "name"),
)

# No unique constraint on (product_id, store_id): legacy rows may collide and the
# aggregator reports them instead of failing the whole read.
availability_table = Table(
    "availability",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("product_id", UUIDColumnType, nullable=False),
    Column("store_id", UUIDColumnType, ForeignKey("store.id"), nullable=False),
    Column("source", Enum(AvailabilitySource, native_enum=False), nullable=False),
    Column("price_range", String, nullable=True),
    Column("last_confirmed_at", UTCDateTime(), nullable=False),
    *_moderation_columns(),
    Index("ix_availability_product_store", "product_id", "store_id"),
    Index("ix_availability_store_id", "store_id"),
)

review_table = Table(
    "review",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("product_id", UUIDColumnType, nullable=False),
    Column("rating", Integer, nullable=False),
    Column("title", String, nullable=True),
    Column("comment", Text, nullable=False),
    *_moderation_columns(),
    Index("ix_review_product_id", "product_id"),
)

city_page_table = Table(
    "city_page",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String, nullable=False, unique=True),
    Column("city_name", String, nullable=False),
    Column("state", String, nullable=False),
    Column("headline", String, nullable=False),
    Column("description", Text, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("updated_by", UUIDColumnType, nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
)

brand_page_table = Table(
    "brand_page",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("brand_name", String, nullable=False),
    Column("slug", String, nullable=False, unique=True),
    Column("display_name", String, nullable=False),
    Column("description", Text, nullable=True),
    Column("website_url", String, nullable=True),
    Column("logo_url", String, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_by", UUIDColumnType, nullable=True),
    Column("updated_by", UUIDColumnType, nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
)

content_edit_table = Table(
    "content_edit",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("target_kind", Enum(EntityKind, native_enum=False), nullable=False),
    Column("target_key", String, nullable=False),
    Column("target_id", UUIDColumnType, nullable=True),
    Column("field", String, key="field_name", nullable=False),
    Column("original_value", Text, nullable=True),
    Column("suggested_value", Text, nullable=True),
    Column("reason", Text, nullable=True),
    Column("auto_applied", Boolean, nullable=False, default=False),
    Column("review_note", Text, nullable=True),
    *_moderation_columns(),
    Index("ix_content_edit_target", "target_kind", "target_key"),
    Index("ix_content_edit_moderation_status", "moderation_status"),
)

TABLE_BY_CLASS: Final[dict[type[Entity], Table]] = {
    Contributor: contributor_table,
    Product: product_table,
    UserProduct: user_product_table,
    Store: store_table,
    AvailabilityRecord: availability_table,
    Review: review_table,
    CityPage: city_page_table,
    BrandPage: brand_page_table,
    ContentEditSuggestion: content_edit_table,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    for entity_cls, table in TABLE_BY_CLASS.items():
        mapper_registry.map_imperatively(entity_cls, table)

    configure_mappers()
    return mapper_registry

