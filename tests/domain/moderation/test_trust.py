from __future__ import annotations

from uuid import uuid4

import pytest

from shelfwise.domain.model import Actor, Contributor, Role, TrustTier
from shelfwise.domain.moderation import classify, classify_user, is_privileged


@pytest.mark.parametrize(
    ("role", "trusted", "expected"),
    [
        (Role.ADMIN, False, TrustTier.FULLY_TRUSTED),
        (Role.ADMIN, True, TrustTier.FULLY_TRUSTED),
        (Role.MODERATOR, False, TrustTier.TRUSTED),
        (Role.USER, True, TrustTier.TRUSTED),
        (Role.USER, False, TrustTier.REGULAR),
    ],
)
def test_classify_applies_rules_in_order(role: Role, trusted: bool, expected: TrustTier) -> None:
    actor = Actor(user_id=uuid4(), role=role, trusted_contributor=trusted)

    assert classify(actor) is expected


def test_classify_missing_subject_is_regular() -> None:
    assert classify(None) is TrustTier.REGULAR


def test_classify_accepts_stored_contributors() -> None:
    contributor = Contributor(display_name="Sam")
    assert classify(contributor) is TrustTier.REGULAR

    contributor.grant_trust()
    assert classify(contributor) is TrustTier.TRUSTED
    assert contributor.trusted_at is not None

    contributor.revoke_trust()
    assert classify(contributor) is TrustTier.REGULAR
    assert contributor.trusted_at is None


class _Contributors:
    def __init__(self, *contributors: Contributor) -> None:
        self._by_id = {contributor.id: contributor for contributor in contributors}

    def add(self, entity: Contributor) -> None:
        self._by_id[entity.id] = entity

    def get(self, entity_id):  # noqa: ANN001, ANN202
        return self._by_id.get(entity_id)


def test_classify_user_fails_closed_for_unknown_ids(caplog: pytest.LogCaptureFixture) -> None:
    admin = Contributor(display_name="Root", role=Role.ADMIN)
    contributors = _Contributors(admin)

    assert classify_user(contributors, admin.id) is TrustTier.FULLY_TRUSTED
    assert classify_user(contributors, None) is TrustTier.REGULAR
    with caplog.at_level("WARNING"):
        assert classify_user(contributors, uuid4()) is TrustTier.REGULAR
    assert "classified as regular" in caplog.text


def test_only_admins_are_privileged() -> None:
    assert is_privileged(Actor(user_id=uuid4(), role=Role.ADMIN))
    assert not is_privileged(Actor(user_id=uuid4(), role=Role.MODERATOR))
    assert not is_privileged(Actor(user_id=uuid4(), trusted_contributor=True))
    assert not is_privileged(None)
