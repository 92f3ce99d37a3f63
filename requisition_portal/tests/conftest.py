"""Shared fixtures for the portal tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable

import pytest

from requisition_portal.config import Settings
from requisition_portal.models.enums import RequisitionStatus
from requisition_portal.models.schemas import FinancialSummary, RequisitionRecord
from requisition_portal.persistence.errors import StoreError
from requisition_portal.persistence.requisition_repository import RequisitionRepository


@pytest.fixture
def mock_settings() -> Settings:
    return Settings(mock_mode=True, seed_sample_data=False)


@pytest.fixture
def make_record() -> Callable[..., RequisitionRecord]:
    def _make(
        requisition_id: str = "REQ-1",
        status: RequisitionStatus = RequisitionStatus.PENDING_REVIEW,
        created_day: int = 1,
        total: float = 22156.0,
    ) -> RequisitionRecord:
        return RequisitionRecord(
            id=requisition_id,
            folio=f"REQ-2024-{requisition_id}",
            administrative_unit="Subdirección de Recursos Materiales",
            reception_date=date(2025, 10, 5),
            max_delivery_date=date(2025, 10, 20),
            elaboration_date=date(2025, 10, 5),
            delivery_place="Almacén Central",
            financial=FinancialSummary(subtotal=19100.0, iva_percent=16, iva_amount=3056.0, total=total),
            status=status,
            created_at=datetime(2025, 10, created_day, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def repository(mock_settings, make_record) -> RequisitionRepository:
    repo = RequisitionRepository(mock_settings)
    repo.insert(make_record("REQ-1"))
    return repo


class RecordingStore:
    """Stand-in for the requisition store that records every update."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def update(self, requisition_id, status, dictamen_payload=None, observations_summary=None):
        self.calls.append({
            "requisition_id": requisition_id,
            "status": status,
            "dictamen_payload": dictamen_payload,
            "observations_summary": observations_summary,
        })
        if self.error is not None:
            raise self.error


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def failing_store() -> RecordingStore:
    return RecordingStore(error=StoreError("connection reset by peer"))
