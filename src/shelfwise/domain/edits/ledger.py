"""Suggested-edit submission and the append-only edit ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shelfwise.domain.edits.targets import (
    REQUIRED_FIELDS,
    EditTargetRef,
    load_target,
    normalize_value,
    write_value,
)
from shelfwise.domain.errors import (
    NoOpEditError,
    PartialWriteError,
    UnauthenticatedError,
    ValidationError,
)
from shelfwise.domain.model import (
    ContentEditSuggestion,
    ContributedMixin,
    ModerationStatus,
    TrustTier,
)
from shelfwise.domain.moderation.policy import (
    EditDecision,
    decide_edit_outcome,
    submission_message,
)
from shelfwise.domain.moderation.trust import classify

if TYPE_CHECKING:
    from uuid import UUID

    from shelfwise.domain.model import Actor
    from shelfwise.domain.ports import CatalogRepositories, CatalogUnitOfWork

log = logging.getLogger(__name__)

# administrator approvals and reverts never raise the review flag
_ADMIN_DECISION: EditDecision = decide_edit_outcome(TrustTier.FULLY_TRUSTED)


@dataclass(slots=True, frozen=True)
class EditResult:
    suggestion_id: UUID
    applied: bool
    needs_review: bool
    status: ModerationStatus
    tier: TrustTier
    message: str


def submit_edit(
    uow: CatalogUnitOfWork,
    target: EditTargetRef,
    field_name: str,
    value: str | None,
    *,
    actor: Actor | None,
    reason: str | None = None,
) -> EditResult:
    """Record a suggested change and apply it immediately for trusted callers.

    Every call appends exactly one ledger row. Trusted and fully trusted callers
    also write the target, which is committed before the ledger row so the
    target stays the source of truth. If the ledger insert then fails,
    ``PartialWriteError(applied=True)`` is raised and the edit stays live.

    Concurrent edits of the same field are last-write-wins on the target; each
    still gets its own ledger row.
    """

    if actor is None:
        raise UnauthenticatedError("Sign in to suggest edits")
    target.check_field(field_name)

    repositories = uow.repositories
    tier = classify(actor)
    decision = decide_edit_outcome(tier)

    loaded = load_target(repositories, target, actor=actor)
    original_value = loaded.current_value(field_name)
    suggested_value = normalize_value(value)
    if suggested_value is None and field_name in REQUIRED_FIELDS[target.kind]:
        raise ValidationError(f"Field {field_name!r} on {target.kind} cannot be cleared")
    if suggested_value == original_value:
        raise NoOpEditError(field_name)

    if decision.auto_applied:
        write_value(
            repositories,
            loaded,
            field_name,
            suggested_value,
            actor=actor,
            decision=decision,
        )
        uow.commit()

    suggestion = ContentEditSuggestion(
        target_kind=target.kind,
        target_key=target.ledger_key,
        target_id=loaded.target_id,
        field_name=field_name,
        original_value=original_value,
        suggested_value=suggested_value,
        reason=normalize_value(reason),
        auto_applied=decision.auto_applied,
        moderation_status=decision.status,
        trusted_contribution=decision.trusted_contribution,
        needs_review=decision.needs_review,
        created_by=actor.user_id,
    )
    try:
        repositories.content_edits.add(suggestion)
        uow.commit()
    except Exception as exc:
        if not decision.auto_applied:
            raise
        uow.rollback()
        log.exception(
            "Edit of %s %s.%s applied but not recorded in the ledger",
            target.kind,
            target.ledger_key,
            field_name,
        )
        raise PartialWriteError(
            f"Edit to {field_name!r} was applied but its audit record could not be saved",
            applied=True,
        ) from exc

    log.info(
        "Edit %s of %s %s.%s by %s (%s): %s",
        suggestion.id,
        target.kind,
        target.ledger_key,
        field_name,
        actor.user_id,
        tier,
        "applied" if decision.auto_applied else "pending",
    )
    return EditResult(
        suggestion_id=suggestion.id,
        applied=decision.auto_applied,
        needs_review=decision.needs_review,
        status=decision.status,
        tier=tier,
        message=submission_message(tier),
    )


def target_ref_for(suggestion: ContentEditSuggestion) -> EditTargetRef:
    return EditTargetRef(suggestion.target_kind, suggestion.target_key)


def apply_suggestion(
    repositories: CatalogRepositories,
    suggestion: ContentEditSuggestion,
    *,
    actor: Actor,
    value: str | None,
    sign_off: bool = False,
) -> bool:
    """Write ``value`` for the suggestion's field; return whether anything changed.

    Used when an administrator approves a pending suggestion (``value`` is the
    suggested value) or reverts an applied one (``value`` is the original).
    With ``sign_off`` a live contributed target also has its review flag cleared.
    """

    loaded = load_target(repositories, target_ref_for(suggestion), actor=actor)
    if loaded.current_value(suggestion.field_name) == value:
        return False
    record = write_value(
        repositories,
        loaded,
        suggestion.field_name,
        value,
        actor=actor,
        decision=_ADMIN_DECISION,
    )
    if sign_off and isinstance(record, ContributedMixin) and record.needs_review:
        record.mark_reviewed(actor.user_id)
    return True


def current_target_value(
    repositories: CatalogRepositories,
    suggestion: ContentEditSuggestion,
    *,
    actor: Actor,
) -> str | None:
    loaded = load_target(repositories, target_ref_for(suggestion), actor=actor)
    return loaded.current_value(suggestion.field_name)
