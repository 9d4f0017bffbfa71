"""Contributors and the verified caller identity attached to each request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from shelfwise.domain.model.base import Entity, utcnow
from shelfwise.domain.model.enums import EntityKind, Role

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Contributor(Entity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CONTRIBUTOR

    display_name: str
    email: str | None = None
    role: Role = Role.USER
    trusted_contributor: bool = False
    trusted_at: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)

    def grant_trust(self, *, at: datetime | None = None) -> None:
        self.trusted_contributor = True
        self.trusted_at = at or utcnow()

    def revoke_trust(self) -> None:
        self.trusted_contributor = False
        self.trusted_at = None

    def as_actor(self) -> Actor:
        return Actor(
            user_id=self.id,
            role=self.role,
            trusted_contributor=self.trusted_contributor,
        )


@dataclass(slots=True, frozen=True)
class Actor:
    """Verified identity of the caller, as supplied by the identity provider."""

    user_id: UUID
    role: Role = Role.USER
    trusted_contributor: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
