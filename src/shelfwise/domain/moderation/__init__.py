"""Trust classification and moderation decisions."""

from __future__ import annotations

from .policy import (
    EditDecision,
    StatusDecision,
    decide_edit_outcome,
    decide_new_entity_status,
    submission_message,
)
from .trust import TrustSubject, classify, classify_user, is_privileged

__all__ = [
    "EditDecision",
    "StatusDecision",
    "TrustSubject",
    "classify",
    "classify_user",
    "decide_edit_outcome",
    "decide_new_entity_status",
    "is_privileged",
    "submission_message",
]
