"""
Requisition Review Portal — Main Entry Point

Print the dashboard summary (CLI):
    python -m requisition_portal

Run as an API server (for the frontend):
    python -m requisition_portal --serve
    # or: uvicorn requisition_portal.api:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys

from requisition_portal.config import get_settings
from requisition_portal.models.enums import RequisitionStatus
from requisition_portal.utils.logger import setup_logging


def run(status_filter: str = "all") -> dict:
    """Print the dashboard for the configured store and return it as a dict."""
    from requisition_portal.api.deps import get_dashboard_service

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    dashboard = get_dashboard_service()
    summary = dashboard.status_summary()
    requisitions = dashboard.list_by_status(status_filter)

    logger.info("=" * 60)
    logger.info(f"  {settings.app_name.upper()}")
    logger.info(f"  Mode: {'MOCK' if settings.mock_mode else 'MONGODB'} | Filter: {status_filter}")
    logger.info("=" * 60)
    logger.info(f"  {RequisitionStatus.IN_CAPTURE.label:<26} {summary.in_capture}")
    logger.info(f"  {RequisitionStatus.PENDING_REVIEW.label:<26} {summary.pending_review}")
    logger.info(f"  {RequisitionStatus.IN_AUTHORIZATION.label:<26} {summary.in_authorization}")
    logger.info(f"  {RequisitionStatus.RETURNED_FOR_CORRECTION.label:<26} {summary.returned_for_correction}")
    logger.info(f"  {RequisitionStatus.AUTHORIZED.label:<26} {summary.authorized}")
    logger.info("-" * 60)
    for r in requisitions:
        logger.info(
            f"  {r.folio:<14} {r.status_label:<26} ${r.total:>12,.2f}  {r.administrative_unit}"
        )
    logger.info("-" * 60)

    return {
        "summary": summary.model_dump(),
        "requisitions": [r.model_dump(mode="json") for r in requisitions],
    }


def serve(host: str | None = None, port: int | None = None) -> None:
    """Start the FastAPI server (for frontend communication)."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    host = host or settings.api_host
    port = port or settings.api_port
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("requisition_portal.api:app", host=host, port=port, reload=settings.debug)


if __name__ == "__main__":
    if "--serve" in sys.argv:
        serve()
    else:
        filter_arg = sys.argv[1] if len(sys.argv) > 1 else "all"
        run(filter_arg)
