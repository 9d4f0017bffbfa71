"""Administrator actions on contributed content and suggested edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shelfwise.domain.edits.ledger import apply_suggestion, current_target_value
from shelfwise.domain.errors import (
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from shelfwise.domain.model import (
    EntityKind,
    ModerationStatus,
    TrustTier,
    effective_status,
)
from shelfwise.domain.moderation.trust import classify

if TYPE_CHECKING:
    from uuid import UUID

    from shelfwise.domain.model import (
        Actor,
        ArchivableMixin,
        ContentEditSuggestion,
        ContributedMixin,
    )
    from shelfwise.domain.ports import (
        CatalogRepositories,
        CatalogUnitOfWork,
        ContributedRepository,
    )

log = logging.getLogger(__name__)

MODERATED_KINDS: tuple[EntityKind, ...] = (
    EntityKind.USER_PRODUCT,
    EntityKind.STORE,
    EntityKind.AVAILABILITY,
    EntityKind.REVIEW,
    EntityKind.CONTENT_EDIT,
)


@dataclass(slots=True, frozen=True)
class ModerationOutcome:
    entity_id: UUID
    kind: EntityKind
    status: ModerationStatus
    needs_review: bool
    reverted: bool = False


@dataclass(slots=True, frozen=True)
class QueueCounts:
    pending: int
    needs_review: int


@dataclass(slots=True)
class ModerationSummary:
    by_kind: dict[EntityKind, QueueCounts] = field(default_factory=dict[EntityKind, QueueCounts])

    @property
    def total_pending(self) -> int:
        return sum(counts.pending for counts in self.by_kind.values())

    @property
    def total_needs_review(self) -> int:
        return sum(counts.needs_review for counts in self.by_kind.values())


def require_admin(actor: Actor | None) -> Actor:
    if actor is None:
        raise UnauthenticatedError("Sign in as an administrator")
    if classify(actor) is not TrustTier.FULLY_TRUSTED:
        raise ForbiddenError("Administrator access required")
    return actor


def _queue(
    repositories: CatalogRepositories, kind: EntityKind
) -> ContributedRepository[ContributedMixin]:
    queues: dict[EntityKind, ContributedRepository[ContributedMixin]] = {
        EntityKind.USER_PRODUCT: repositories.user_products,
        EntityKind.STORE: repositories.stores,
        EntityKind.AVAILABILITY: repositories.availability,
        EntityKind.REVIEW: repositories.reviews,
        EntityKind.CONTENT_EDIT: repositories.content_edits,
    }
    try:
        return queues[kind]
    except KeyError as exc:
        raise ValidationError(f"{kind} is not a moderated kind") from exc


def _load(repositories: CatalogRepositories, kind: EntityKind, entity_id: UUID) -> ContributedMixin:
    entity = _queue(repositories, kind).get(entity_id)
    if entity is None:
        raise NotFoundError(f"{kind} {entity_id} not found")
    return entity


def _outcome(entity: ContributedMixin, *, reverted: bool = False) -> ModerationOutcome:
    return ModerationOutcome(
        entity_id=entity.id,
        kind=entity.ENTITY_KIND,
        status=effective_status(entity),
        needs_review=entity.needs_review,
        reverted=reverted,
    )


def approve(
    uow: CatalogUnitOfWork, kind: EntityKind, entity_id: UUID, *, actor: Actor | None
) -> ModerationOutcome:
    """Approve a pending contribution. Use :func:`approve_edit` for suggestions."""

    admin = require_admin(actor)
    if kind is EntityKind.CONTENT_EDIT:
        return approve_edit(uow, entity_id, actor=admin)
    entity = _load(uow.repositories, kind, entity_id)
    entity.approve(admin.user_id)
    uow.commit()
    log.info("Approved %s %s", kind, entity_id)
    return _outcome(entity)


def reject(
    uow: CatalogUnitOfWork, kind: EntityKind, entity_id: UUID, *, actor: Actor | None
) -> ModerationOutcome:
    admin = require_admin(actor)
    if kind is EntityKind.CONTENT_EDIT:
        return reject_edit(uow, entity_id, actor=admin)
    entity = _load(uow.repositories, kind, entity_id)
    entity.reject(admin.user_id)
    uow.commit()
    log.info("Rejected %s %s", kind, entity_id)
    return _outcome(entity)


def mark_reviewed(
    uow: CatalogUnitOfWork, kind: EntityKind, entity_id: UUID, *, actor: Actor | None
) -> ModerationOutcome:
    """Clear the review flag on live, trusted-applied content."""

    admin = require_admin(actor)
    if kind is EntityKind.CONTENT_EDIT:
        return mark_edit_reviewed(uow, entity_id, actor=admin)
    entity = _load(uow.repositories, kind, entity_id)
    entity.mark_reviewed(admin.user_id)
    uow.commit()
    log.info("Marked %s %s reviewed", kind, entity_id)
    return _outcome(entity)


def _load_suggestion(
    repositories: CatalogRepositories, suggestion_id: UUID
) -> ContentEditSuggestion:
    suggestion = repositories.content_edits.get(suggestion_id)
    if suggestion is None:
        raise NotFoundError(f"Content edit {suggestion_id} not found")
    return suggestion


def approve_edit(
    uow: CatalogUnitOfWork,
    suggestion_id: UUID,
    *,
    actor: Actor | None,
    note: str | None = None,
) -> ModerationOutcome:
    """Approve a pending suggestion and write its value to the target."""

    admin = require_admin(actor)
    repositories = uow.repositories
    suggestion = _load_suggestion(repositories, suggestion_id)
    if effective_status(suggestion) is not ModerationStatus.PENDING:
        raise ValidationError(f"Content edit {suggestion_id} is not pending")

    apply_suggestion(repositories, suggestion, actor=admin, value=suggestion.suggested_value)
    suggestion.approve(admin.user_id)
    suggestion.review_note = note
    uow.commit()
    log.info("Approved content edit %s and applied it", suggestion_id)
    return _outcome(suggestion)


def reject_edit(
    uow: CatalogUnitOfWork,
    suggestion_id: UUID,
    *,
    actor: Actor | None,
    note: str | None = None,
) -> ModerationOutcome:
    """Reject a suggestion, reverting it if it was auto-applied and still current.

    A target that has moved on since the edit (a later edit overwrote the
    field) is left untouched.
    A reverted store or product is signed off, so it leaves the review queue.
    """

    admin = require_admin(actor)
    repositories = uow.repositories
    suggestion = _load_suggestion(repositories, suggestion_id)

    reverted = False
    if suggestion.auto_applied and suggestion.is_live:
        try:
            current = current_target_value(repositories, suggestion, actor=admin)
        except NotFoundError:
            log.warning("Target of content edit %s no longer exists", suggestion_id)
        else:
            if current == suggestion.suggested_value:
                reverted = apply_suggestion(
                    repositories,
                    suggestion,
                    actor=admin,
                    value=suggestion.original_value,
                    sign_off=True,
                )
            else:
                log.warning(
                    "Not reverting content edit %s: %s.%s has changed since",
                    suggestion_id,
                    suggestion.target_key,
                    suggestion.field_name,
                )

    suggestion.reject(admin.user_id)
    suggestion.review_note = note
    uow.commit()
    log.info("Rejected content edit %s (reverted=%s)", suggestion_id, reverted)
    return _outcome(suggestion, reverted=reverted)


def mark_edit_reviewed(
    uow: CatalogUnitOfWork,
    suggestion_id: UUID,
    *,
    actor: Actor | None,
    note: str | None = None,
) -> ModerationOutcome:
    admin = require_admin(actor)
    suggestion = _load_suggestion(uow.repositories, suggestion_id)
    suggestion.mark_reviewed(admin.user_id)
    if note is not None:
        suggestion.review_note = note
    uow.commit()
    log.info("Marked content edit %s reviewed", suggestion_id)
    return _outcome(suggestion)


def _archivable_records(
    repositories: CatalogRepositories, product_id: UUID
) -> list[ArchivableMixin]:
    canonical = repositories.products.get(product_id)
    if canonical is not None:
        shadow = repositories.user_products.find_shadow(product_id)
        return [canonical] if shadow is None else [canonical, shadow]
    contributed = repositories.user_products.get(product_id)
    if contributed is not None:
        return [contributed]
    raise NotFoundError(f"Product {product_id} not found")


def archive_product(
    uow: CatalogUnitOfWork, product_id: UUID, *, actor: Actor | None
) -> None:
    """Hide a logical product (and any shadow of it) from unprivileged readers."""

    admin = require_admin(actor)
    for record in _archivable_records(uow.repositories, product_id):
        record.archive(admin.user_id)
    uow.commit()
    log.info("Archived product %s", product_id)


def unarchive_product(
    uow: CatalogUnitOfWork, product_id: UUID, *, actor: Actor | None
) -> None:
    require_admin(actor)
    for record in _archivable_records(uow.repositories, product_id):
        record.unarchive()
    uow.commit()
    log.info("Unarchived product %s", product_id)


def set_trusted_contributor(
    uow: CatalogUnitOfWork, user_id: UUID, *, trusted: bool, actor: Actor | None
) -> None:
    require_admin(actor)
    contributor = uow.repositories.contributors.get(user_id)
    if contributor is None:
        raise NotFoundError(f"Contributor {user_id} not found")
    if trusted:
        contributor.grant_trust()
    else:
        contributor.revoke_trust()
    uow.commit()
    log.info("Contributor %s trusted=%s", user_id, trusted)


def moderation_summary(repositories: CatalogRepositories) -> ModerationSummary:
    """Queue sizes per kind: regular submissions awaiting a decision, and live
    trusted content awaiting sign-off."""

    summary = ModerationSummary()
    for kind in MODERATED_KINDS:
        queue = _queue(repositories, kind)
        pending = [item for item in queue.list_pending() if not item.trusted_contribution]
        summary.by_kind[kind] = QueueCounts(
            pending=len(pending),
            needs_review=len(queue.list_needing_review()),
        )
    return summary
