"""initial catalog and moderation schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from shelfwise.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_MODERATION_STATUS = ("PENDING", "APPROVED", "CONFIRMED", "REJECTED")


def _moderation_columns() -> list[sa.Column[object]]:
    return [
        sa.Column(
            "moderation_status",
            sa.Enum(*_MODERATION_STATUS, name="moderationstatus", native_enum=False),
            nullable=True,
        ),
        sa.Column("trusted_contribution", sa.Boolean(), nullable=False),
        sa.Column("needs_review", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", UTCDateTime(), nullable=True),
    ]


def _archive_columns() -> list[sa.Column[object]]:
    return [
        sa.Column("archived", sa.Boolean(), nullable=False),
        sa.Column("archived_at", UTCDateTime(), nullable=True),
        sa.Column("archived_by", sa.Uuid(), nullable=True),
    ]


def _product_content_columns() -> list[sa.Column[object]]:
    return [
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("brand", sa.String(), nullable=False),
        sa.Column("size_or_variant", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("nutrition_summary", sa.Text(), nullable=True),
        sa.Column("ingredient_summary", sa.Text(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "contributor",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column(
            "role",
            sa.Enum("USER", "MODERATOR", "ADMIN", name="role", native_enum=False),
            nullable=False,
        ),
        sa.Column("trusted_contributor", sa.Boolean(), nullable=False),
        sa.Column("trusted_at", UTCDateTime(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_contributor")),
    )
    op.create_table(
        "product",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_product_content_columns(),
        *_archive_columns(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product")),
    )
    op.create_index("ix_product_brand", "product", ["brand"])
    op.create_table(
        "user_product",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_product_content_columns(),
        sa.Column("source_product_id", sa.Uuid(), nullable=True),
        *_moderation_columns(),
        *_archive_columns(),
        sa.ForeignKeyConstraint(
            ["source_product_id"],
            ["product.id"],
            name=op.f("fk_user_product_source_product_id_product"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_user_product")),
    )
    op.create_index("ix_user_product_source_product_id", "user_product", ["source_product_id"])
    op.create_index("ix_user_product_moderation_status", "user_product", ["moderation_status"])
    op.create_table(
        "store",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "store_type",
            sa.Enum(
                "BRICK_AND_MORTAR",
                "ONLINE_RETAILER",
                "BRAND_DIRECT",
                name="storetype",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("region_or_scope", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website_url", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("zip_code", sa.String(), nullable=True),
        sa.Column("country", sa.String(), nullable=False),
        sa.Column("place_id", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_store")),
    )
    op.create_index("ix_store_place_id", "store", ["place_id"])
    op.create_index("ix_store_name", "store", ["name"])
    op.create_table(
        "availability",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("store_id", sa.Uuid(), nullable=False),
        sa.Column(
            "source",
            sa.Enum(
                "SEED_DATA",
                "USER_CONTRIBUTION",
                name="availabilitysource",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("price_range", sa.String(), nullable=True),
        sa.Column("last_confirmed_at", UTCDateTime(), nullable=False),
        *_moderation_columns(),
        sa.ForeignKeyConstraint(
            ["store_id"], ["store.id"], name=op.f("fk_availability_store_id_store")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_availability")),
    )
    op.create_index("ix_availability_product_store", "availability", ["product_id", "store_id"])
    op.create_index("ix_availability_store_id", "availability", ["store_id"])
    op.create_table(
        "review",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=False),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_review")),
    )
    op.create_index("ix_review_product_id", "review", ["product_id"])
    op.create_table(
        "city_page",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("city_name", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=False),
        sa.Column("headline", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_city_page")),
        sa.UniqueConstraint("slug", name=op.f("uq_city_page_slug")),
    )
    op.create_table(
        "brand_page",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("brand_name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website_url", sa.String(), nullable=True),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_brand_page")),
        sa.UniqueConstraint("slug", name=op.f("uq_brand_page_slug")),
    )
    op.create_table(
        "content_edit",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "target_kind",
            sa.Enum(
                "PRODUCT",
                "USER_PRODUCT",
                "STORE",
                "AVAILABILITY",
                "REVIEW",
                "CITY_PAGE",
                "BRAND_PAGE",
                "CONTENT_EDIT",
                "CONTRIBUTOR",
                name="entitykind",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("target_key", sa.String(), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=True),
        sa.Column("field", sa.String(), nullable=False),
        sa.Column("original_value", sa.Text(), nullable=True),
        sa.Column("suggested_value", sa.Text(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("auto_applied", sa.Boolean(), nullable=False),
        sa.Column("review_note", sa.Text(), nullable=True),
        *_moderation_columns(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_content_edit")),
    )
    op.create_index("ix_content_edit_target", "content_edit", ["target_kind", "target_key"])
    op.create_index(
        "ix_content_edit_moderation_status", "content_edit", ["moderation_status"]
    )


def downgrade() -> None:
    op.drop_table("content_edit")
    op.drop_table("brand_page")
    op.drop_table("city_page")
    op.drop_table("review")
    op.drop_table("availability")
    op.drop_table("store")
    op.drop_table("user_product")
    op.drop_table("product")
    op.drop_table("contributor")
