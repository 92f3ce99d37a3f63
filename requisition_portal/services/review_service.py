"""
Review Service — one Dictamen Engine per requisition under review.

A session is opened once from the loaded record and lives until a terminal
action succeeds. Sessions for different requisitions never share state.
"""

from __future__ import annotations

import logging

from requisition_portal.models.enums import SectionState
from requisition_portal.models.schemas import ActionResult, Dictamen
from requisition_portal.orchestration.dictamen_engine import DictamenEngine
from requisition_portal.persistence.errors import ReviewSessionNotFoundError
from requisition_portal.persistence.requisition_repository import RequisitionRepository
from requisition_portal.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, repository: RequisitionRepository, audit: AuditService | None = None):
        self.repository = repository
        self.audit = audit or AuditService()
        self._sessions: dict[str, DictamenEngine] = {}

    # ── Sessions ─────────────────────────────────────────

    def open_session(self, requisition_id: str) -> DictamenEngine:
        """Return the open session, or start one if the requisition exists."""
        engine = self._sessions.get(requisition_id)
        if engine is not None:
            return engine

        record = self.repository.fetch_by_id(requisition_id)
        # Handlers run in a threadpool; the first concurrent opener wins
        engine = self._sessions.setdefault(requisition_id, DictamenEngine(self.repository))
        logger.info(f"Opened review of {requisition_id} ({record.folio}, {record.status.label})")
        return engine

    def get_session(self, requisition_id: str) -> DictamenEngine:
        engine = self._sessions.get(requisition_id)
        if engine is None:
            raise ReviewSessionNotFoundError(requisition_id)
        return engine

    def close_session(self, requisition_id: str) -> None:
        self._sessions.pop(requisition_id, None)

    def discard_session(self, requisition_id: str) -> None:
        """Abandon an open review without writing anything to the store."""
        if self._sessions.pop(requisition_id, None) is None:
            raise ReviewSessionNotFoundError(requisition_id)
        logger.info(f"Discarded review of {requisition_id}")

    @property
    def open_sessions(self) -> list[str]:
        return list(self._sessions)

    # ── Edits (section numbers are 1-based) ──────────────

    def set_section_state(self, requisition_id: str, section_number: int, state: SectionState) -> Dictamen:
        engine = self.get_session(requisition_id)
        engine.set_section_state(section_number - 1, state)
        return engine.compute_dictamen()

    def set_section_comment(self, requisition_id: str, section_number: int, text: str) -> Dictamen:
        engine = self.get_session(requisition_id)
        engine.set_section_comment(section_number - 1, text)
        return engine.compute_dictamen()

    def dictamen(self, requisition_id: str) -> Dictamen:
        return self.get_session(requisition_id).compute_dictamen()

    # ── Terminal actions ─────────────────────────────────

    def authorize(self, requisition_id: str, reviewer: str = "") -> ActionResult:
        result = self.get_session(requisition_id).authorize(requisition_id)
        return self._finish("authorize", result, reviewer)

    def return_for_correction(self, requisition_id: str, reviewer: str = "") -> ActionResult:
        engine = self.get_session(requisition_id)
        summary = engine.compute_dictamen().observations_summary
        result = engine.return_for_correction(requisition_id)
        return self._finish("return", result, reviewer, details=summary if result.ok else "")

    def _finish(self, action: str, result: ActionResult, reviewer: str, details: str = "") -> ActionResult:
        if result.ok:
            self.close_session(result.requisition_id)
            self.audit.record(result.requisition_id, action, "ok", details or result.message, reviewer)
        else:
            self.audit.record(
                result.requisition_id, action, result.kind.value, result.message, reviewer
            )
        return result
