"""Audit records for suggested content edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from shelfwise.domain.model.base import ContributedMixin
from shelfwise.domain.model.enums import EntityKind

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ContentEditSuggestion(ContributedMixin):
    """One suggested change of one field on one target.

    Append-only. ``auto_applied`` means the target already held
    ``suggested_value`` when this row was written.
    """

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CONTENT_EDIT

    target_kind: EntityKind
    target_key: str
    field_name: str
    original_value: str | None
    suggested_value: str | None
    target_id: UUID | None = None
    reason: str | None = None
    auto_applied: bool = False
    review_note: str | None = None

    @property
    def user_id(self) -> UUID | None:
        return self.created_by
