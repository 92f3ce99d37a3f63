"""
Dashboard Service — listings and status counters over the requisition store.
"""

from __future__ import annotations

import logging

from requisition_portal.models.enums import RequisitionStatus
from requisition_portal.models.schemas import RequisitionSummary, StatusSummary
from requisition_portal.persistence.errors import InvalidStatusError
from requisition_portal.persistence.requisition_repository import RequisitionRepository

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


def parse_status_filter(value: str | RequisitionStatus) -> RequisitionStatus | None:
    """``"all"`` → None; otherwise a status in wire or display form."""
    if isinstance(value, RequisitionStatus):
        return value
    if value == ALL_STATUSES:
        return None
    try:
        return RequisitionStatus.parse(value)
    except ValueError as e:
        raise InvalidStatusError(value) from e


class DashboardService:
    def __init__(self, repository: RequisitionRepository):
        self.repository = repository

    def list_by_status(self, status_filter: str | RequisitionStatus = ALL_STATUSES) -> list[RequisitionSummary]:
        status = parse_status_filter(status_filter)
        summaries = self.repository.list_by_status(status)
        logger.debug(f"Listed {len(summaries)} requisitions (filter={status_filter})")
        return summaries

    def update_status(self, requisition_id: str, new_status: str | RequisitionStatus) -> RequisitionStatus:
        status = parse_status_filter(new_status)
        if status is None:
            raise InvalidStatusError(str(new_status))
        self.repository.update_status(requisition_id, status)
        return status

    def status_summary(self) -> StatusSummary:
        counts = {status: 0 for status in RequisitionStatus}
        for summary in self.repository.list_by_status():
            counts[summary.status] += 1
        return StatusSummary(
            in_capture=counts[RequisitionStatus.IN_CAPTURE],
            pending_review=counts[RequisitionStatus.PENDING_REVIEW],
            in_authorization=counts[RequisitionStatus.IN_AUTHORIZATION],
            returned_for_correction=counts[RequisitionStatus.RETURNED_FOR_CORRECTION],
            authorized=counts[RequisitionStatus.AUTHORIZED],
        )
