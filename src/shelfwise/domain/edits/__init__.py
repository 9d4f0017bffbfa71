"""Content-edit submission and the edit ledger."""

from __future__ import annotations

from .ledger import EditResult, submit_edit
from .targets import EDITABLE_FIELDS, REQUIRED_FIELDS, EditTargetRef, normalize_value

__all__ = [
    "EDITABLE_FIELDS",
    "REQUIRED_FIELDS",
    "EditResult",
    "EditTargetRef",
    "normalize_value",
    "submit_edit",
]
