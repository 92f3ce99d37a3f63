"""
Dictamen Engine — technical review of a single requisition.

Holds the six section slots for the requisition under review, derives the
consolidated dictamen on every read and gates the two terminal actions
(authorize / return for correction) before delegating the write to the
requisition store.

Design rules:
  1. Slots are built once per review session; there is no re-sync from storage.
  2. Validation failures and store failures never touch the slots, so the
     reviewer can fix the problem and retry.
  3. The engine does not arbitrate concurrent terminal actions; callers
     serialize them per requisition.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from requisition_portal.models.enums import FailureKind, RequisitionStatus, SectionState
from requisition_portal.models.schemas import (
    ActionResult,
    Dictamen,
    SectionDictamenEntry,
    SectionValidation,
)
from requisition_portal.orchestration.transitions import (
    next_section_comment,
    next_section_state,
    route_disposition,
)
from requisition_portal.persistence.errors import RequisitionNotFoundError, StoreError

logger = logging.getLogger(__name__)

SECTION_NAMES: tuple[str, ...] = (
    "Datos Generales de la Requisición",
    "Detalle de Bienes o Servicios",
    "Resumen Financiero",
    "Condiciones y Anexos",
    "Garantías y Observaciones",
    "Aprobaciones y Firmas",
)
SECTION_COUNT = len(SECTION_NAMES)

AUTHORIZE_BLOCKED = "incomplete or contains rejections"
RETURN_WITHOUT_REJECTIONS = "no rejections to justify return"
RETURN_COMMENTS_INCOMPLETE = "rejections present but comments incomplete"


# ── Pure derivations ─────────────────────────────────────

def comments_complete(sections: Sequence[SectionValidation]) -> bool:
    """Every rejected section carries a non-blank comment."""
    return all(
        s.comment.strip() != ""
        for s in sections
        if s.state == SectionState.REJECTED
    )


def observations_summary(sections: Sequence[SectionValidation]) -> str:
    return "\n\n".join(
        f"{s.name}: {s.comment}"
        for s in sorted(sections, key=lambda s: s.section_number)
        if s.state == SectionState.REJECTED and s.comment.strip() != ""
    )


def compute_dictamen(sections: Sequence[SectionValidation]) -> Dictamen:
    """Consolidate a set of section verdicts. An empty set is never approved."""
    has_sections = len(sections) > 0
    all_approved = has_sections and all(s.state == SectionState.APPROVED for s in sections)
    has_rejections = any(s.state == SectionState.REJECTED for s in sections)
    pending = sum(1 for s in sections if s.state == SectionState.UNSET)
    is_complete = has_sections and pending == 0
    comments_ok = comments_complete(sections)

    return Dictamen(
        sections=[s.model_copy() for s in sections],
        all_approved=all_approved,
        has_rejections=has_rejections,
        is_complete=is_complete,
        comments_complete=comments_ok,
        pending_sections=pending,
        observations_summary=observations_summary(sections),
        disposition=route_disposition(all_approved, is_complete, has_rejections, comments_ok),
    )


def build_payload(sections: Sequence[SectionValidation]) -> dict[str, SectionDictamenEntry]:
    """Persisted shape: ``section_1`` .. ``section_6`` → {state, observaciones}."""
    return {
        f"section_{s.section_number}": SectionDictamenEntry(
            state=s.state.to_wire(),
            observaciones=s.comment,
        )
        for s in sections
    }


# ── Engine ───────────────────────────────────────────────

class DictamenEngine:
    """Six-slot review state for one requisition, plus the terminal actions."""

    def __init__(self, store: Any):
        self.store = store
        self._sections: list[SectionValidation] = [
            SectionValidation(section_number=i + 1, name=name)
            for i, name in enumerate(SECTION_NAMES)
        ]

    # ── Edits ────────────────────────────────────────────

    def _slot(self, section_index: int) -> SectionValidation:
        if not 0 <= section_index < SECTION_COUNT:
            raise IndexError(
                f"section_index {section_index} out of range [0, {SECTION_COUNT})"
            )
        return self._sections[section_index]

    def set_section_state(self, section_index: int, new_state: SectionState) -> None:
        slot = self._slot(section_index)
        resulting = next_section_state(slot.state, new_state)
        slot.comment = next_section_comment(resulting, slot.comment)
        slot.state = resulting
        logger.debug(
            f"Section {slot.section_number} → {resulting.value} (requested {new_state.value})"
        )

    def set_section_comment(self, section_index: int, text: str) -> None:
        self._slot(section_index).comment = text

    # ── Reads ────────────────────────────────────────────

    def compute_dictamen(self) -> Dictamen:
        return compute_dictamen(self._sections)

    def validate_comments_complete(self) -> bool:
        return comments_complete(self._sections)

    # ── Terminal actions ─────────────────────────────────

    def authorize(self, requisition_id: str) -> ActionResult:
        dictamen = self.compute_dictamen()
        if not (dictamen.all_approved and dictamen.is_complete):
            logger.info(f"[{requisition_id}] Authorize blocked: {AUTHORIZE_BLOCKED}")
            return ActionResult.failure(requisition_id, FailureKind.VALIDATION, AUTHORIZE_BLOCKED)

        return self._commit(
            requisition_id,
            RequisitionStatus.AUTHORIZED,
            # Empty when all sections are approved; clears a prior return's summary
            observations=dictamen.observations_summary,
            message="La requisición ha sido autorizada exitosamente.",
        )

    def return_for_correction(self, requisition_id: str) -> ActionResult:
        dictamen = self.compute_dictamen()
        if not dictamen.has_rejections:
            logger.info(f"[{requisition_id}] Return blocked: {RETURN_WITHOUT_REJECTIONS}")
            return ActionResult.failure(
                requisition_id, FailureKind.VALIDATION, RETURN_WITHOUT_REJECTIONS
            )
        if not self.validate_comments_complete():
            logger.info(f"[{requisition_id}] Return blocked: {RETURN_COMMENTS_INCOMPLETE}")
            return ActionResult.failure(
                requisition_id, FailureKind.VALIDATION, RETURN_COMMENTS_INCOMPLETE
            )

        return self._commit(
            requisition_id,
            RequisitionStatus.RETURNED_FOR_CORRECTION,
            observations=dictamen.observations_summary,
            message="La requisición ha sido devuelta para corrección.",
        )

    def _commit(
        self,
        requisition_id: str,
        status: RequisitionStatus,
        observations: str,
        message: str,
    ) -> ActionResult:
        payload = build_payload(self._sections)
        try:
            self.store.update(
                requisition_id,
                status,
                dictamen_payload=payload,
                observations_summary=observations,
            )
        except RequisitionNotFoundError as e:
            logger.error(f"[{requisition_id}] Commit failed: {e}")
            return ActionResult.failure(requisition_id, FailureKind.NOT_FOUND, e.message)
        except StoreError as e:
            logger.error(f"[{requisition_id}] Commit failed: {e}")
            return ActionResult.failure(requisition_id, FailureKind.STORE, e.message)

        logger.info(f"[{requisition_id}] Dictamen committed → {status.value}")
        return ActionResult.ack(requisition_id, status, message)
