"""
Tests: dashboard and review services.

Run with:
    pytest requisition_portal/tests/test_services.py -v
"""

import pytest
from requisition_portal.models.enums import Disposition, FailureKind, RequisitionStatus, SectionState
from requisition_portal.persistence.errors import (
    InvalidStatusError,
    RequisitionNotFoundError,
    ReviewSessionNotFoundError,
)
from requisition_portal.services import AuditService, DashboardService, ReviewService


@pytest.fixture
def dashboard(repository, make_record) -> DashboardService:
    repository.insert(make_record("REQ-2", status=RequisitionStatus.AUTHORIZED, created_day=2))
    repository.insert(make_record("REQ-3", status=RequisitionStatus.AUTHORIZED, created_day=3))
    repository.insert(make_record("REQ-4", status=RequisitionStatus.IN_CAPTURE, created_day=4))
    return DashboardService(repository)


@pytest.fixture
def review(repository) -> ReviewService:
    return ReviewService(repository, AuditService())


class TestDashboardService:
    def test_all(self, dashboard):
        assert len(dashboard.list_by_status("all")) == 4

    @pytest.mark.parametrize("status_filter", ["autorizada", "Autorizada", RequisitionStatus.AUTHORIZED])
    def test_filter_accepts_wire_display_and_enum(self, dashboard, status_filter):
        assert [s.id for s in dashboard.list_by_status(status_filter)] == ["REQ-3", "REQ-2"]

    def test_invalid_filter(self, dashboard):
        with pytest.raises(InvalidStatusError):
            dashboard.list_by_status("archivada")

    def test_status_summary(self, dashboard):
        summary = dashboard.status_summary()
        assert summary.pending_review == 1
        assert summary.authorized == 2
        assert summary.in_capture == 1
        assert summary.in_authorization == 0
        assert summary.returned_for_correction == 0

    def test_update_status_refreshes_counts(self, dashboard):
        status = dashboard.update_status("REQ-4", "Devuelta para Corrección")
        assert status == RequisitionStatus.RETURNED_FOR_CORRECTION
        summary = dashboard.status_summary()
        assert summary.returned_for_correction == 1
        assert summary.in_capture == 0

    def test_update_status_rejects_all(self, dashboard):
        with pytest.raises(InvalidStatusError):
            dashboard.update_status("REQ-4", "all")

    def test_update_status_missing(self, dashboard):
        with pytest.raises(RequisitionNotFoundError):
            dashboard.update_status("nope", "autorizada")


class TestReviewService:
    def test_open_missing_requisition(self, review):
        with pytest.raises(RequisitionNotFoundError):
            review.open_session("nope")

    def test_edit_without_session(self, review):
        with pytest.raises(ReviewSessionNotFoundError):
            review.set_section_state("REQ-1", 1, SectionState.APPROVED)

    def test_reopen_returns_same_session(self, review):
        first = review.open_session("REQ-1")
        review.set_section_state("REQ-1", 1, SectionState.APPROVED)
        assert review.open_session("REQ-1") is first
        assert review.dictamen("REQ-1").sections[0].state == SectionState.APPROVED

    def test_sessions_are_isolated(self, review, repository, make_record):
        repository.insert(make_record("REQ-2"))
        review.open_session("REQ-1")
        review.open_session("REQ-2")
        review.set_section_state("REQ-1", 1, SectionState.APPROVED)
        assert review.dictamen("REQ-2").sections[0].state == SectionState.UNSET

    def test_section_numbers_are_one_based(self, review):
        review.open_session("REQ-1")
        dictamen = review.set_section_state("REQ-1", 6, SectionState.REJECTED)
        dictamen = review.set_section_comment("REQ-1", 6, "Sin firma")
        assert dictamen.sections[5].state == SectionState.REJECTED
        assert dictamen.sections[5].comment == "Sin firma"
        assert dictamen.disposition == Disposition.READY_TO_RETURN

    def test_authorize_writes_and_closes_session(self, review, repository):
        review.open_session("REQ-1")
        for n in range(1, 7):
            review.set_section_state("REQ-1", n, SectionState.APPROVED)

        result = review.authorize("REQ-1", reviewer="Juan Pérez García")

        assert result.ok is True
        record = repository.fetch_by_id("REQ-1")
        assert record.status == RequisitionStatus.AUTHORIZED
        assert record.dictamen_sections["section_6"].state == "aprobado"
        with pytest.raises(ReviewSessionNotFoundError):
            review.dictamen("REQ-1")
        trail = review.audit.get_trail("REQ-1")
        assert [(e["action"], e["outcome"], e["reviewer"]) for e in trail] == [
            ("authorize", "ok", "Juan Pérez García")
        ]

    def test_return_records_summary(self, review, repository):
        review.open_session("REQ-1")
        review.set_section_state("REQ-1", 3, SectionState.REJECTED)
        review.set_section_comment("REQ-1", 3, "Falta firma")

        result = review.return_for_correction("REQ-1")

        assert result.ok is True
        record = repository.fetch_by_id("REQ-1")
        assert record.status == RequisitionStatus.RETURNED_FOR_CORRECTION
        assert record.observations_summary == "Resumen Financiero: Falta firma"
        assert review.audit.get_trail("REQ-1")[0]["details"] == "Resumen Financiero: Falta firma"

    def test_failed_action_keeps_session(self, review, repository):
        review.open_session("REQ-1")
        review.set_section_state("REQ-1", 2, SectionState.REJECTED)

        result = review.return_for_correction("REQ-1")

        assert result.ok is False
        assert result.kind == FailureKind.VALIDATION
        assert review.dictamen("REQ-1").sections[1].state == SectionState.REJECTED
        assert repository.fetch_by_id("REQ-1").status == RequisitionStatus.PENDING_REVIEW
        assert review.audit.get_trail("REQ-1")[0]["outcome"] == "validation"

    def test_authorize_after_return_clears_summary(self, review, repository):
        review.open_session("REQ-1")
        review.set_section_state("REQ-1", 3, SectionState.REJECTED)
        review.set_section_comment("REQ-1", 3, "Falta firma")
        assert review.return_for_correction("REQ-1").ok is True

        review.open_session("REQ-1")
        for n in range(1, 7):
            review.set_section_state("REQ-1", n, SectionState.APPROVED)
        assert review.authorize("REQ-1").ok is True

        record = repository.fetch_by_id("REQ-1")
        assert record.status == RequisitionStatus.AUTHORIZED
        assert record.observations_summary == ""
        assert record.dictamen_sections["section_3"].state == "aprobado"
        assert record.dictamen_sections["section_3"].observaciones == ""

    def test_discard_session(self, review, repository):
        review.open_session("REQ-1")
        review.set_section_state("REQ-1", 1, SectionState.APPROVED)

        review.discard_session("REQ-1")

        assert review.open_sessions == []
        assert repository.fetch_by_id("REQ-1").status == RequisitionStatus.PENDING_REVIEW
        assert review.open_session("REQ-1").compute_dictamen().pending_sections == 6

    def test_discard_without_session(self, review):
        with pytest.raises(ReviewSessionNotFoundError):
            review.discard_session("REQ-1")
