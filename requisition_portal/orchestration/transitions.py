"""
Transition rules for the technical review.

``next_section_state`` is the single toggle rule shared by every call site
that edits a section. ``route_disposition`` maps a consolidated dictamen to
the one terminal action the reviewer may take.
"""

from __future__ import annotations

from requisition_portal.models.enums import Disposition, SectionState


# ── Per-section toggle ───────────────────────────────────

def next_section_state(current: SectionState, requested: SectionState) -> SectionState:
    """
    Requesting the state a section already holds deselects it (back to UNSET).
    Any other request is applied directly, including APPROVED <-> REJECTED.
    """
    if requested == current:
        return SectionState.UNSET
    return requested


def next_section_comment(resulting: SectionState, comment: str) -> str:
    """Approving clears the comment; rejecting or deselecting keeps it."""
    if resulting == SectionState.APPROVED:
        return ""
    return comment


# ── Overall disposition ──────────────────────────────────

def route_disposition(
    all_approved: bool,
    is_complete: bool,
    has_rejections: bool,
    comments_complete: bool,
) -> Disposition:
    """
    Rejections           + all comments  → READY_TO_RETURN
    Rejections           + blank comment → RETURN_BLOCKED
    Every section approved               → READY_TO_AUTHORIZE
    Anything else (sections still unset) → INCOMPLETE
    """
    if has_rejections:
        if comments_complete:
            return Disposition.READY_TO_RETURN
        return Disposition.RETURN_BLOCKED
    if all_approved and is_complete:
        return Disposition.READY_TO_AUTHORIZE
    return Disposition.INCOMPLETE
