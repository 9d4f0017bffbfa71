"""Trust classification of contributors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from shelfwise.domain.model import Role, TrustTier

if TYPE_CHECKING:
    from uuid import UUID

    from shelfwise.domain.ports import ContributorRepository

log = logging.getLogger(__name__)


class TrustSubject(Protocol):
    """Anything carrying a role and the trusted-contributor flag."""

    @property
    def role(self) -> Role: ...

    @property
    def trusted_contributor(self) -> bool: ...


def classify(subject: TrustSubject | None) -> TrustTier:
    """Map a contributor (or the verified caller) to a trust tier.

    Rules apply in order: admin, moderator, trusted flag. An unresolved
    contributor is ``REGULAR``.
    """

    if subject is None:
        return TrustTier.REGULAR
    if subject.role == Role.ADMIN:
        return TrustTier.FULLY_TRUSTED
    if subject.role == Role.MODERATOR:
        return TrustTier.TRUSTED
    if subject.trusted_contributor:
        return TrustTier.TRUSTED
    return TrustTier.REGULAR


def classify_user(contributors: ContributorRepository, user_id: UUID | None) -> TrustTier:
    """Classify a stored contributor by id, failing closed to ``REGULAR``."""

    if user_id is None:
        return TrustTier.REGULAR
    contributor = contributors.get(user_id)
    if contributor is None:
        log.warning("Unknown contributor %s classified as regular", user_id)
        return TrustTier.REGULAR
    return classify(contributor)


def is_privileged(subject: TrustSubject | None) -> bool:
    """Whether the caller may see archived catalog entries."""

    return classify(subject) is TrustTier.FULLY_TRUSTED
