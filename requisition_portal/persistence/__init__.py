"""Persistence — MongoClient, RequisitionRepository, typed errors."""

from requisition_portal.persistence.errors import (
    InvalidStatusError,
    RequisitionNotFoundError,
    RequisitionPortalError,
    ReviewSessionNotFoundError,
    StoreError,
)
from requisition_portal.persistence.mongo_client import MongoClient
from requisition_portal.persistence.requisition_repository import RequisitionRepository

__all__ = [
    "MongoClient",
    "RequisitionRepository",
    "RequisitionPortalError",
    "RequisitionNotFoundError",
    "StoreError",
    "ReviewSessionNotFoundError",
    "InvalidStatusError",
]
