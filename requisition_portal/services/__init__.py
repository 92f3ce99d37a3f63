"""Services — AuditService, DashboardService, ReviewService."""

from requisition_portal.services.audit_service import AuditService
from requisition_portal.services.dashboard_service import DashboardService
from requisition_portal.services.review_service import ReviewService

__all__ = ["AuditService", "DashboardService", "ReviewService"]
