"""
Data schemas for requisitions, dashboard listings and the technical review
(dictamen) of a requisition.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field

from .enums import Disposition, FailureKind, RequisitionStatus, SectionState


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── Requisition content (sections 1-6) ───────────────────


class LineItem(BaseModel):
    """One partida of section 2."""
    partida: int
    cucop: str = ""
    quantity: float = 0
    unit_of_measure: str = ""
    unit_price: float = 0.0
    amount: float = 0.0
    description: str = ""


class FinancialSummary(BaseModel):
    """Section 3. Totals arrive pre-computed from the capture workflow."""
    subtotal: float = 0.0
    iva_percent: float = 16.0
    iva_amount: float = 0.0
    total: float = 0.0


class ConditionsAndAnnexes(BaseModel):
    budget_authorization: str = "N/A"
    authorization_number: str = "N/A"
    manufacturing_time: str = "N/A"
    multiyear: str = "N/A"
    annexes: str = "Sin anexos"
    delivery_conditions: str = "Sin condiciones especiales"
    sanitary_registration: str = "N/A"
    standards: str = "N/A"
    training: str = "N/A"


class GuaranteeTerms(BaseModel):
    """Section 5, the only block the reviewer may edit."""
    advance_applies: bool = False
    conventional_penalties: bool = True
    advance_guarantee: str = "10%"
    hidden_defects_guarantee: str = "10%"
    compliance_guarantee: str = "10%"
    observations: str = ""


class ApprovalsAndSignatures(BaseModel):
    requesting_area: str = "Área Requirente"
    approval_state: str = "pendiente"


# ── Dictamen payload (persisted) ─────────────────────────


class SectionDictamenEntry(BaseModel):
    """Persisted verdict of one section, keyed ``section_N`` in the payload."""
    state: Optional[str] = None  # "aprobado" | "rechazado" | None
    observaciones: str = ""


# ── Requisition record ───────────────────────────────────


class RequisitionRecord(BaseModel):
    id: str
    folio: str
    administrative_unit: str
    reception_date: date
    max_delivery_date: date
    elaboration_date: date
    delivery_place: str
    page: str = "1/1"
    items: list[LineItem] = Field(default_factory=list)
    financial: FinancialSummary = Field(default_factory=FinancialSummary)
    conditions: ConditionsAndAnnexes = Field(default_factory=ConditionsAndAnnexes)
    guarantees: GuaranteeTerms = Field(default_factory=GuaranteeTerms)
    approvals: ApprovalsAndSignatures = Field(default_factory=ApprovalsAndSignatures)
    status: RequisitionStatus = RequisitionStatus.IN_CAPTURE
    dictamen_sections: dict[str, SectionDictamenEntry] = Field(default_factory=dict)
    observations_summary: str = ""
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: Optional[datetime] = None


class RequisitionSummary(BaseModel):
    """Row of the dashboard table."""
    id: str
    folio: str
    administrative_unit: str
    reception_date: date
    max_delivery_date: date
    delivery_place: str
    status: RequisitionStatus
    status_label: str
    total: float = 0.0

    @classmethod
    def from_record(cls, record: RequisitionRecord) -> RequisitionSummary:
        return cls(
            id=record.id,
            folio=record.folio,
            administrative_unit=record.administrative_unit,
            reception_date=record.reception_date,
            max_delivery_date=record.max_delivery_date,
            delivery_place=record.delivery_place,
            status=record.status,
            status_label=record.status.label,
            total=record.financial.total,
        )


class StatusSummary(BaseModel):
    """Counters for the dashboard status cards."""
    in_capture: int = 0
    pending_review: int = 0
    in_authorization: int = 0
    returned_for_correction: int = 0
    authorized: int = 0


# ── Technical review ─────────────────────────────────────


class SectionValidation(BaseModel):
    section_number: int = Field(frozen=True)
    name: str = Field(frozen=True)
    state: SectionState = SectionState.UNSET
    comment: str = ""


class Dictamen(BaseModel):
    """Consolidated verdict, derived from the six section slots on every read."""
    sections: list[SectionValidation] = []
    all_approved: bool = False
    has_rejections: bool = False
    is_complete: bool = False
    comments_complete: bool = True
    pending_sections: int = 0
    observations_summary: str = ""
    disposition: Disposition = Disposition.INCOMPLETE


class ActionResult(BaseModel):
    """Outcome of a terminal review action (authorize / return)."""
    ok: bool
    requisition_id: str
    status: Optional[RequisitionStatus] = None
    kind: Optional[FailureKind] = None
    message: str = ""

    @classmethod
    def ack(cls, requisition_id: str, status: RequisitionStatus, message: str = "") -> ActionResult:
        return cls(ok=True, requisition_id=requisition_id, status=status, message=message)

    @classmethod
    def failure(cls, requisition_id: str, kind: FailureKind, message: str) -> ActionResult:
        return cls(ok=False, requisition_id=requisition_id, kind=kind, message=message)
