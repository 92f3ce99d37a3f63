"""
Requisition Repository — persistence layer for requisition records.
Handles fetch, status/dictamen updates, dashboard listings and section 5 edits.
Uses an in-memory dict in mock mode; a MongoDB collection otherwise.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any

from pymongo.errors import PyMongoError

from requisition_portal.config import Settings, get_settings
from requisition_portal.models.enums import RequisitionStatus
from requisition_portal.models.schemas import (
    GuaranteeTerms,
    RequisitionRecord,
    RequisitionSummary,
    SectionDictamenEntry,
)
from requisition_portal.persistence.errors import RequisitionNotFoundError, StoreError
from requisition_portal.persistence.mongo_client import MongoClient

logger = logging.getLogger(__name__)


class RequisitionRepository:
    """
    Save/load requisition documents.
    Documents are stored in their JSON form, keyed by requisition id.
    """

    def __init__(self, settings: Settings | None = None, mongo: MongoClient | None = None):
        self.settings = settings or get_settings()
        self._memory_store: dict[str, dict[str, Any]] = {}
        self._collection: Any = None
        if not self.settings.mock_mode:
            mongo = mongo or MongoClient(self.settings)
            self._collection = mongo.get_collection(self.settings.requisitions_collection)

    # ── Writes ───────────────────────────────────────────

    def insert(self, record: RequisitionRecord) -> None:
        doc = record.model_dump(mode="json")
        if self._collection is None:
            self._memory_store[record.id] = doc
        else:
            try:
                self._collection.replace_one({"_id": record.id}, {"_id": record.id, **doc}, upsert=True)
            except PyMongoError as e:
                raise StoreError(f"Error al guardar la requisición {record.id}: {e}") from e
        logger.info(f"Stored requisition {record.id} ({record.folio})")

    def update(
        self,
        requisition_id: str,
        status: RequisitionStatus,
        dictamen_payload: dict[str, SectionDictamenEntry] | None = None,
        observations_summary: str | None = None,
    ) -> None:
        """Write a status change and, when given, the dictamen of the review."""
        fields: dict[str, Any] = {"status": status.value}
        if dictamen_payload is not None:
            fields["dictamen_sections"] = {
                key: entry.model_dump(mode="json") for key, entry in dictamen_payload.items()
            }
        if observations_summary is not None:
            fields["observations_summary"] = observations_summary
        self._set_fields(requisition_id, fields)
        logger.info(f"Updated requisition {requisition_id} → {status.value}")

    def update_status(self, requisition_id: str, new_status: RequisitionStatus) -> None:
        self._set_fields(requisition_id, {"status": new_status.value})
        logger.info(f"Status of {requisition_id} → {new_status.value}")

    def save_guarantees(self, requisition_id: str, guarantees: GuaranteeTerms) -> None:
        self._set_fields(requisition_id, {"guarantees": guarantees.model_dump(mode="json")})
        logger.info(f"Saved guarantees for {requisition_id}")

    def _set_fields(self, requisition_id: str, fields: dict[str, Any]) -> None:
        fields = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}

        if self._collection is None:
            doc = self._memory_store.get(requisition_id)
            if doc is None:
                raise RequisitionNotFoundError(requisition_id)
            doc.update(deepcopy(fields))
            return

        try:
            result = self._collection.update_one({"_id": requisition_id}, {"$set": fields})
        except PyMongoError as e:
            raise StoreError(f"Error al actualizar la requisición {requisition_id}: {e}") from e
        if result.matched_count == 0:
            raise RequisitionNotFoundError(requisition_id)

    # ── Reads ────────────────────────────────────────────

    def fetch_by_id(self, requisition_id: str) -> RequisitionRecord:
        if self._collection is None:
            doc = self._memory_store.get(requisition_id)
        else:
            try:
                doc = self._collection.find_one({"_id": requisition_id})
            except PyMongoError as e:
                raise StoreError(f"Error al cargar la requisición {requisition_id}: {e}") from e
        if doc is None:
            raise RequisitionNotFoundError(requisition_id)
        return _record_from_doc(doc)

    def list_by_status(self, status: RequisitionStatus | None = None) -> list[RequisitionSummary]:
        """Summaries for the dashboard, newest first. ``None`` lists every status."""
        if self._collection is None:
            docs = list(self._memory_store.values())
        else:
            try:
                docs = list(self._collection.find({}))
            except PyMongoError as e:
                raise StoreError(f"Error al cargar requisiciones: {e}") from e

        records = [_record_from_doc(d) for d in docs]
        if status is not None:
            records = [r for r in records if r.status == status]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return [RequisitionSummary.from_record(r) for r in records]

    def count(self) -> int:
        if self._collection is None:
            return len(self._memory_store)
        try:
            return self._collection.count_documents({})
        except PyMongoError as e:
            raise StoreError(f"Error al contar requisiciones: {e}") from e


def _record_from_doc(doc: dict[str, Any]) -> RequisitionRecord:
    data = {k: v for k, v in doc.items() if k != "_id"}
    data.setdefault("id", str(doc.get("_id", "")))
    raw_status = data.get("status")
    try:
        RequisitionStatus(raw_status)
    except ValueError:
        # The storage column is free-form; anything outside the five values
        # is shown as still in capture.
        logger.warning(f"Unknown status {raw_status!r} on {data['id']}, treating as en_captura")
        data["status"] = RequisitionStatus.IN_CAPTURE.value
    return RequisitionRecord(**deepcopy(data))
