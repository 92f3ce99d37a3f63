"""
API routes — dashboard listings and requisition records.

Routes:
  GET   /health                               → API health check
  GET   /api/requisitions?status=...          → Dashboard table (all | wire | display status)
  GET   /api/requisitions/summary             → Counters for the status cards
  GET   /api/requisitions/{id}                → Full requisition record
  PATCH /api/requisitions/{id}/status         → Change status from the dashboard
  PUT   /api/requisitions/{id}/guarantees     → Save section 5 (guarantees & observations)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from requisition_portal.api.deps import get_dashboard_service, get_repository
from requisition_portal.models.schemas import (
    GuaranteeTerms,
    RequisitionRecord,
    RequisitionSummary,
    StatusSummary,
)
from requisition_portal.persistence.requisition_repository import RequisitionRepository
from requisition_portal.services.dashboard_service import ALL_STATUSES, DashboardService

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
requisitions_router = APIRouter()


# ── Request / response schemas ───────────────────────────
class StatusUpdateRequest(BaseModel):
    status: str  # wire ("autorizada") or display ("Autorizada") form


class StatusUpdateResponse(BaseModel):
    requisition_id: str
    status: str
    status_label: str


class AckResponse(BaseModel):
    requisition_id: str
    message: str


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Dashboard ────────────────────────────────────────────

@requisitions_router.get("", response_model=list[RequisitionSummary])
def list_requisitions(
    status: str = ALL_STATUSES,
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    return dashboard.list_by_status(status)


@requisitions_router.get("/summary", response_model=StatusSummary)
def status_summary(dashboard: DashboardService = Depends(get_dashboard_service)):
    return dashboard.status_summary()


@requisitions_router.patch("/{requisition_id}/status", response_model=StatusUpdateResponse)
def update_status(
    requisition_id: str,
    body: StatusUpdateRequest,
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    status = dashboard.update_status(requisition_id, body.status)
    logger.info(f"[{requisition_id}] Dashboard status change → {status.value}")
    return StatusUpdateResponse(
        requisition_id=requisition_id,
        status=status.value,
        status_label=status.label,
    )


# ── Record ───────────────────────────────────────────────

@requisitions_router.get("/{requisition_id}", response_model=RequisitionRecord)
def get_requisition(
    requisition_id: str,
    repository: RequisitionRepository = Depends(get_repository),
):
    return repository.fetch_by_id(requisition_id)


@requisitions_router.put("/{requisition_id}/guarantees", response_model=AckResponse)
def save_guarantees(
    requisition_id: str,
    body: GuaranteeTerms,
    repository: RequisitionRepository = Depends(get_repository),
):
    repository.save_guarantees(requisition_id, body)
    return AckResponse(requisition_id=requisition_id, message="Garantías guardadas")
