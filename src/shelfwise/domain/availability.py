"""Per-store roll-ups of availability facts by moderation status."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shelfwise.domain.model import ModerationStatus, effective_status

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from shelfwise.domain.model import Actor, AvailabilityRecord
    from shelfwise.domain.ports import AvailabilityRepository

log = logging.getLogger(__name__)


@dataclass(slots=True)
class StatusCounts:
    confirmed: int = 0
    pending: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.confirmed + self.pending + self.rejected

    def add(self, status: ModerationStatus) -> None:
        if status is ModerationStatus.PENDING:
            self.pending += 1
        elif status is ModerationStatus.REJECTED:
            self.rejected += 1
        else:
            self.confirmed += 1


def aggregate_availability(
    availability: AvailabilityRepository, store_ids: Sequence[UUID]
) -> dict[UUID, StatusCounts]:
    """Count availability records per store by effective status.

    Every requested store is present in the result, with zero counts if it has
    no records. Records without a status count as confirmed. A repeated
    ``(product_id, store_id)`` pair is a write-path bug: it is logged and only
    its first record is counted.
    """

    counts: dict[UUID, StatusCounts] = {store_id: StatusCounts() for store_id in store_ids}
    seen: dict[tuple[UUID, UUID], UUID] = {}
    for record in availability.list_for_stores(list(counts)):
        pair = (record.product_id, record.store_id)
        if pair in seen:
            log.error(
                "Duplicate availability for product %s at store %s: %s and %s",
                record.product_id,
                record.store_id,
                seen[pair],
                record.id,
            )
            continue
        seen[pair] = record.id
        counts[record.store_id].add(effective_status(record))
    return counts


def visible_products(availability: AvailabilityRepository, store_id: UUID) -> list[UUID]:
    """Products publicly listed at ``store_id`` (confirmed or legacy records)."""

    return list(availability.visible_product_ids(store_id))


def product_availability(
    availability: AvailabilityRepository,
    product_id: UUID,
    *,
    viewer: Actor | None = None,
) -> list[AvailabilityRecord]:
    """Visible records for a product, plus the viewer's own pending reports."""

    visible: list[AvailabilityRecord] = []
    for record in availability.list_for_product(product_id):
        status = effective_status(record)
        if status is ModerationStatus.CONFIRMED:
            visible.append(record)
        elif (
            status is ModerationStatus.PENDING
            and viewer is not None
            and record.created_by == viewer.user_id
        ):
            visible.append(record)
    return visible
