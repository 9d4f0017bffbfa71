"""Product reviews."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from shelfwise.domain.errors import ValidationError
from shelfwise.domain.model.base import ContributedMixin
from shelfwise.domain.model.enums import EntityKind

if TYPE_CHECKING:
    from uuid import UUID

MIN_RATING = 1
MAX_RATING = 5


@dataclass(eq=False, kw_only=True)
class Review(ContributedMixin):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.REVIEW

    product_id: UUID
    rating: int
    comment: str
    title: str | None = None

    def __post_init__(self) -> None:
        if not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValidationError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {self.rating}"
            )
        if not self.comment.strip():
            raise ValidationError("Review comment must not be blank")
