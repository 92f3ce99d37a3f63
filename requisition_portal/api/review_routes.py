"""
Review routes — technical review (dictamen) of one requisition.

Routes:
  POST /api/review/{id}                               → Open a review session
  GET  /api/review/{id}                               → Current dictamen
  DELETE /api/review/{id}                             → Abandon the session, nothing saved
  PUT  /api/review/{id}/sections/{number}/state       → Toggle approve / reject
  PUT  /api/review/{id}/sections/{number}/comment     → Set rejection comment
  POST /api/review/{id}/authorize                     → Authorize (all sections approved)
  POST /api/review/{id}/return                        → Return for correction

Failed terminal actions keep the failure kind in the body so the reviewer
can tell an unfinished dictamen (422) apart from a failed save (502).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from requisition_portal.api.deps import get_review_service
from requisition_portal.models.enums import FailureKind, SectionState
from requisition_portal.models.schemas import ActionResult, Dictamen
from requisition_portal.orchestration.dictamen_engine import SECTION_COUNT
from requisition_portal.services.review_service import ReviewService

logger = logging.getLogger(__name__)

review_router = APIRouter()

_FAILURE_STATUS_CODES = {
    FailureKind.VALIDATION: 422,
    FailureKind.STORE: 502,
    FailureKind.NOT_FOUND: 404,
}


# ── Request schemas ──────────────────────────────────────
class SectionStateRequest(BaseModel):
    state: SectionState


class SectionCommentRequest(BaseModel):
    comment: str = ""


class ReviewActionRequest(BaseModel):
    reviewer: str = ""


def _action_response(result: ActionResult):
    if result.ok:
        return result
    return JSONResponse(
        status_code=_FAILURE_STATUS_CODES[result.kind],
        content=result.model_dump(mode="json"),
    )


# ── Session ──────────────────────────────────────────────

@review_router.post("/{requisition_id}", response_model=Dictamen)
def open_review(requisition_id: str, review: ReviewService = Depends(get_review_service)):
    return review.open_session(requisition_id).compute_dictamen()


@review_router.get("/{requisition_id}", response_model=Dictamen)
def get_dictamen(requisition_id: str, review: ReviewService = Depends(get_review_service)):
    return review.dictamen(requisition_id)


@review_router.delete("/{requisition_id}", status_code=204)
def discard_review(requisition_id: str, review: ReviewService = Depends(get_review_service)):
    review.discard_session(requisition_id)
    return Response(status_code=204)


# ── Section edits ────────────────────────────────────────

@review_router.put("/{requisition_id}/sections/{section_number}/state", response_model=Dictamen)
def set_section_state(
    requisition_id: str,
    body: SectionStateRequest,
    section_number: int = Path(..., ge=1, le=SECTION_COUNT),
    review: ReviewService = Depends(get_review_service),
):
    return review.set_section_state(requisition_id, section_number, body.state)


@review_router.put("/{requisition_id}/sections/{section_number}/comment", response_model=Dictamen)
def set_section_comment(
    requisition_id: str,
    body: SectionCommentRequest,
    section_number: int = Path(..., ge=1, le=SECTION_COUNT),
    review: ReviewService = Depends(get_review_service),
):
    return review.set_section_comment(requisition_id, section_number, body.comment)


# ── Terminal actions ─────────────────────────────────────

@review_router.post("/{requisition_id}/authorize", response_model=ActionResult)
def authorize(
    requisition_id: str,
    body: ReviewActionRequest | None = None,
    review: ReviewService = Depends(get_review_service),
):
    reviewer = body.reviewer if body else ""
    logger.info(f"[{requisition_id}] Authorize requested by {reviewer or 'anonymous'}")
    return _action_response(review.authorize(requisition_id, reviewer))


@review_router.post("/{requisition_id}/return", response_model=ActionResult)
def return_for_correction(
    requisition_id: str,
    body: ReviewActionRequest | None = None,
    review: ReviewService = Depends(get_review_service),
):
    reviewer = body.reviewer if body else ""
    logger.info(f"[{requisition_id}] Return requested by {reviewer or 'anonymous'}")
    return _action_response(review.return_for_correction(requisition_id, reviewer))
