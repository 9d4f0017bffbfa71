"""Pydantic models for JSON payloads accepted on the command line."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shelfwise.domain.contributions import ProductDraft
from shelfwise.domain.duplicates import StoreCandidate
from shelfwise.domain.model import StoreType


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _split_labels(value: object) -> object:
    if isinstance(value, str):
        return [label.strip() for label in value.split(",") if label.strip()]
    return value


class PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class StoreCandidatePayload(PayloadModel):
    name: str = Field(min_length=1)
    store_type: StoreType = StoreType.BRICK_AND_MORTAR
    region_or_scope: str = "local"
    description: str | None = None
    website_url: str | None = Field(default=None, alias="website")
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(default=None, alias="zip")
    country: str = "US"
    place_id: str | None = None
    phone_number: str | None = Field(default=None, alias="phone")

    _normalize_optional = field_validator(
        "description",
        "website_url",
        "address",
        "city",
        "state",
        "zip_code",
        "place_id",
        "phone_number",
        mode="before",
    )(_blank_to_none)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    def to_candidate(self) -> StoreCandidate:
        return StoreCandidate(
            name=self.name,
            store_type=self.store_type,
            region_or_scope=self.region_or_scope,
            description=self.description,
            website_url=self.website_url,
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            country=self.country,
            place_id=self.place_id,
            phone_number=self.phone_number,
        )


class ProductDraftPayload(PayloadModel):
    name: str
    brand: str
    size_or_variant: str = Field(alias="size")
    description: str | None = None
    categories: list[str] = Field(default_factory=list[str])
    tags: list[str] = Field(default_factory=list[str])
    image_url: str | None = None
    nutrition_summary: str | None = None
    ingredient_summary: str | None = None

    _normalize_optional = field_validator(
        "description",
        "image_url",
        "nutrition_summary",
        "ingredient_summary",
        mode="before",
    )(_blank_to_none)
    _normalize_labels = field_validator("categories", "tags", mode="before")(_split_labels)

    def to_draft(self) -> ProductDraft:
        return ProductDraft(
            name=self.name,
            brand=self.brand,
            size_or_variant=self.size_or_variant,
            description=self.description,
            categories=list(self.categories),
            tags=list(self.tags),
            image_url=self.image_url,
            nutrition_summary=self.nutrition_summary,
            ingredient_summary=self.ingredient_summary,
        )
