"""
Typed exceptions for the requisition portal.

Every exception carries a machine-readable ``code`` so the API layer can map
it to a response without parsing messages.
"""

from __future__ import annotations


class RequisitionPortalError(Exception):
    """Base class for all portal errors."""

    code: str = "PORTAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RequisitionNotFoundError(RequisitionPortalError):
    code = "REQUISITION_NOT_FOUND"

    def __init__(self, requisition_id: str):
        self.requisition_id = requisition_id
        super().__init__(f"Requisición {requisition_id} no encontrada")


class StoreError(RequisitionPortalError):
    """The backing store rejected or failed a read/write."""

    code = "STORE_FAILURE"


class ReviewSessionNotFoundError(RequisitionPortalError):
    code = "REVIEW_SESSION_NOT_FOUND"

    def __init__(self, requisition_id: str):
        self.requisition_id = requisition_id
        super().__init__(f"No hay una revisión abierta para la requisición {requisition_id}")


class InvalidStatusError(RequisitionPortalError):
    code = "INVALID_STATUS"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Estatus desconocido: {value!r}")
