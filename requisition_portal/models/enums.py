from __future__ import annotations

from enum import Enum


class RequisitionStatus(str, Enum):
    """Requisition lifecycle status. Values are the wire/storage form."""

    IN_CAPTURE = "en_captura"
    PENDING_REVIEW = "pendiente_revision"
    IN_AUTHORIZATION = "en_autorizacion"
    AUTHORIZED = "autorizada"
    RETURNED_FOR_CORRECTION = "devuelta"

    @property
    def label(self) -> str:
        """Display form shown on the dashboard."""
        return _STATUS_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> RequisitionStatus:
        for status, text in _STATUS_LABELS.items():
            if text == label:
                return status
        raise ValueError(f"Unknown status label: {label!r}")

    @classmethod
    def parse(cls, value: str) -> RequisitionStatus:
        """Accept either the wire value or the display label."""
        try:
            return cls(value)
        except ValueError:
            return cls.from_label(value)


_STATUS_LABELS: dict[RequisitionStatus, str] = {
    RequisitionStatus.IN_CAPTURE: "En Captura",
    RequisitionStatus.PENDING_REVIEW: "Pendiente de Revisión",
    RequisitionStatus.IN_AUTHORIZATION: "En Autorización",
    RequisitionStatus.AUTHORIZED: "Autorizada",
    RequisitionStatus.RETURNED_FOR_CORRECTION: "Devuelta para Corrección",
}


class SectionState(str, Enum):
    UNSET = "sin_dictaminar"
    APPROVED = "aprobado"
    REJECTED = "rechazado"

    def to_wire(self) -> str | None:
        # Unset sections persist as null
        return None if self is SectionState.UNSET else self.value


class Disposition(str, Enum):
    INCOMPLETE = "INCOMPLETE"
    READY_TO_AUTHORIZE = "READY_TO_AUTHORIZE"
    RETURN_BLOCKED = "RETURN_BLOCKED"
    READY_TO_RETURN = "READY_TO_RETURN"


class FailureKind(str, Enum):
    VALIDATION = "validation"
    STORE = "store"
    NOT_FOUND = "not_found"
