"""
API dependencies — process-wide singletons shared by the routers.
"""

from __future__ import annotations

from functools import lru_cache

from requisition_portal.config import get_settings
from requisition_portal.persistence.requisition_repository import RequisitionRepository
from requisition_portal.persistence.sample_data import seed_repository
from requisition_portal.services.audit_service import AuditService
from requisition_portal.services.dashboard_service import DashboardService
from requisition_portal.services.review_service import ReviewService


@lru_cache(maxsize=1)
def get_repository() -> RequisitionRepository:
    settings = get_settings()
    repository = RequisitionRepository(settings)
    if settings.mock_mode and settings.seed_sample_data:
        seed_repository(repository)
    return repository


@lru_cache(maxsize=1)
def get_audit_service() -> AuditService:
    return AuditService()


@lru_cache(maxsize=1)
def get_dashboard_service() -> DashboardService:
    return DashboardService(get_repository())


@lru_cache(maxsize=1)
def get_review_service() -> ReviewService:
    return ReviewService(get_repository(), get_audit_service())


def reset() -> None:
    """Drop every cached singleton (tests, settings reload)."""
    get_review_service.cache_clear()
    get_dashboard_service.cache_clear()
    get_audit_service.cache_clear()
    get_repository.cache_clear()
    get_settings.cache_clear()
