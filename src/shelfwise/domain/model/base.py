"""
Base building blocks:
identity, moderation lifecycle, archival.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar
from uuid import UUID, uuid4

from shelfwise.domain.errors import ValidationError
from shelfwise.domain.model.enums import EntityKind, ModerationStatus, is_live, live_status_for


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)

    # class-level discriminator; subclasses must override
    ENTITY_KIND: ClassVar[EntityKind]

    @property
    def entity_kind(self) -> EntityKind:
        return self.ENTITY_KIND


@dataclass(eq=False, kw_only=True)
class ContributedMixin(Entity):
    """Moderation lifecycle shared by every user-contributed record.

    ``moderation_status`` is ``None`` only for rows written before the field
    existed; read it through :func:`effective_status`.
    """

    moderation_status: ModerationStatus | None = None
    trusted_contribution: bool = False
    needs_review: bool = False
    created_by: UUID | None = None
    created_at: datetime = field(default_factory=utcnow)
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None

    @property
    def live_status(self) -> ModerationStatus:
        return live_status_for(self.ENTITY_KIND)

    @property
    def is_live(self) -> bool:
        return is_live(effective_status(self))

    def approve(self, reviewer: UUID, *, at: datetime | None = None) -> None:
        current = effective_status(self)
        if current is not ModerationStatus.PENDING:
            raise ValidationError(
                f"Cannot approve {self.ENTITY_KIND} {self.id}: status is {current}"
            )
        self.moderation_status = self.live_status
        self.needs_review = False
        self._stamp_review(reviewer, at)

    def reject(self, reviewer: UUID, *, at: datetime | None = None) -> None:
        current = effective_status(self)
        if current is ModerationStatus.REJECTED:
            raise ValidationError(f"{self.ENTITY_KIND} {self.id} is already rejected")
        self.moderation_status = ModerationStatus.REJECTED
        self.needs_review = False
        self._stamp_review(reviewer, at)

    def mark_reviewed(self, reviewer: UUID, *, at: datetime | None = None) -> None:
        """Sign off live content that was auto-applied by a trusted contributor."""

        if not self.is_live:
            raise ValidationError(
                f"Only live content can be marked reviewed; {self.ENTITY_KIND} {self.id} "
                f"is {effective_status(self)}"
            )
        self.needs_review = False
        self._stamp_review(reviewer, at)

    def _stamp_review(self, reviewer: UUID, at: datetime | None) -> None:
        self.reviewed_by = reviewer
        self.reviewed_at = at or utcnow()


def effective_status(entity: ContributedMixin) -> ModerationStatus:
    """Return the moderation status of ``entity``, treating an absent status as live.

    Records that predate moderation were only ever written by trusted import paths,
    so absence maps to the kind's live label (``confirmed`` for availability and
    stores). It never maps to ``pending``.
    """

    if entity.moderation_status is None:
        return live_status_for(entity.ENTITY_KIND)
    return entity.moderation_status


@dataclass(eq=False, kw_only=True)
class ArchivableMixin(Entity):
    """Soft-delete flag consulted by catalog reads."""

    archived: bool = False
    archived_at: datetime | None = None
    archived_by: UUID | None = None

    def archive(self, by: UUID, *, at: datetime | None = None) -> None:
        self.archived = True
        self.archived_at = at or utcnow()
        self.archived_by = by

    def unarchive(self) -> None:
        self.archived = False
        self.archived_at = None
        self.archived_by = None
