"""
FastAPI application factory and API package.

Run with:
    uvicorn requisition_portal.api:app --reload --port 8000

Or via main.py:
    python -m requisition_portal --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from requisition_portal.config import get_settings
from requisition_portal.api.routes import health_router, requisitions_router
from requisition_portal.api.review_routes import review_router
from requisition_portal.persistence.errors import (
    InvalidStatusError,
    RequisitionNotFoundError,
    RequisitionPortalError,
    ReviewSessionNotFoundError,
    StoreError,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS_CODES: dict[type[RequisitionPortalError], int] = {
    RequisitionNotFoundError: 404,
    ReviewSessionNotFoundError: 404,
    InvalidStatusError: 400,
    StoreError: 502,
}


async def _portal_error_handler(request: Request, exc: RequisitionPortalError) -> JSONResponse:
    status_code = _ERROR_STATUS_CODES.get(type(exc), 500)
    logger.warning(f"{request.method} {request.url.path} → {status_code} {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code, "detail": exc.message},
    )


def create_app() -> FastAPI:
    """Application factory — create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="Requisition Review Portal API",
        description="Dashboard and technical review of procurement requisitions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS: allow the frontend (adjust origins in production)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(RequisitionPortalError, _portal_error_handler)

    application.include_router(health_router, tags=["Health"])
    application.include_router(requisitions_router, prefix="/api/requisitions", tags=["Requisitions"])
    application.include_router(review_router, prefix="/api/review", tags=["Review"])

    logger.info(f"Created {settings.app_name} API (mock_mode={settings.mock_mode})")
    return application


# Module-level instance for `uvicorn requisition_portal.api:app`
app = create_app()
