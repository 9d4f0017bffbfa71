"""Error taxonomy shared by the moderation and catalog services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shelfwise.domain.model import Store


class DomainError(Exception):
    """Base class for errors surfaced to callers of the domain services."""


class ValidationError(DomainError, ValueError):
    """Input rejected before any write: disallowed field, malformed id, bad transition."""


class NoOpEditError(ValidationError):
    """Suggested value equals the value currently stored on the target."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Suggested value for {field!r} is the same as the current value")
        self.field = field


class NotFoundError(DomainError):
    """Requested entity does not exist (or is invisible to everyone)."""


class ForbiddenError(DomainError):
    """Entity exists but the caller may not see it or act on it."""


class UnauthenticatedError(ForbiddenError):
    """Write attempted without an acting caller."""


class ConflictError(DomainError):
    """Creation would duplicate an existing record.

    ``existing`` carries the exact match when there is one; ``similar`` carries
    advisory matches the caller may offer instead of creating a new record.
    """

    def __init__(
        self,
        message: str,
        *,
        existing: object | None = None,
        similar: Sequence[Store] = (),
    ) -> None:
        super().__init__(message)
        self.existing = existing
        self.similar = tuple(similar)


class PartialWriteError(DomainError):
    """One half of a two-step write succeeded and the other did not.

    ``applied`` tells whether the target entity already holds the new value.
    The target entity stays authoritative either way.
    """

    def __init__(self, message: str, *, applied: bool) -> None:
        super().__init__(message)
        self.applied = applied
