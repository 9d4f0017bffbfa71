"""Moderation decisions keyed by trust tier.

Every contribution path asks this module what to persist; none of them
re-derives tier rules locally. All functions here are total and do no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

from shelfwise.domain.model import EntityKind, ModerationStatus, TrustTier, live_status_for


@dataclass(slots=True, frozen=True)
class StatusDecision:
    """Initial moderation state of a new contributed entity.

    ``requires_review`` says whether a human must look at the submission at all.
    For pending submissions that is implied by the status, so the persisted
    ``needs_review`` flag is only raised for content that is already live.
    """

    tier: TrustTier
    status: ModerationStatus
    requires_review: bool

    @property
    def needs_review(self) -> bool:
        return self.requires_review and self.status is not ModerationStatus.PENDING

    @property
    def trusted_contribution(self) -> bool:
        return self.tier is not TrustTier.REGULAR

    @property
    def is_live(self) -> bool:
        return self.status is not ModerationStatus.PENDING


@dataclass(slots=True, frozen=True)
class EditDecision:
    """How a suggested edit is recorded and whether it touches the target."""

    tier: TrustTier
    status: ModerationStatus
    auto_applied: bool
    needs_review: bool

    @property
    def trusted_contribution(self) -> bool:
        return self.tier is not TrustTier.REGULAR


def decide_new_entity_status(
    tier: TrustTier, kind: EntityKind = EntityKind.USER_PRODUCT
) -> StatusDecision:
    if tier is TrustTier.REGULAR:
        return StatusDecision(tier=tier, status=ModerationStatus.PENDING, requires_review=True)
    return StatusDecision(
        tier=tier,
        status=live_status_for(kind),
        requires_review=tier is TrustTier.TRUSTED,
    )


def decide_edit_outcome(tier: TrustTier) -> EditDecision:
    if tier is TrustTier.REGULAR:
        return EditDecision(
            tier=tier,
            status=ModerationStatus.PENDING,
            auto_applied=False,
            needs_review=False,
        )
    return EditDecision(
        tier=tier,
        status=live_status_for(EntityKind.CONTENT_EDIT),
        auto_applied=True,
        needs_review=tier is TrustTier.TRUSTED,
    )


def submission_message(tier: TrustTier) -> str:
    """User-facing summary of what happened to a submission."""

    if tier is TrustTier.REGULAR:
        return "Submitted for review"
    if tier is TrustTier.TRUSTED:
        return "Applied and submitted for review"
    return "Applied"
