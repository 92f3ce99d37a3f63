"""
Tests: HTTP API over the sample data (mock mode).

Run with:
    pytest requisition_portal/tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

import requisition_portal.api.deps as deps
from requisition_portal.api import create_app
from requisition_portal.models.enums import FailureKind
from requisition_portal.persistence.errors import StoreError


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("MOCK_MODE", "true")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "true")
    deps.reset()
    with TestClient(create_app()) as c:
        yield c
    deps.reset()


def _approve(client, rid, numbers):
    for n in numbers:
        r = client.put(f"/api/review/{rid}/sections/{n}/state", json={"state": "aprobado"})
        assert r.status_code == 200


class TestDashboardRoutes:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"

    def test_list_all(self, client):
        rows = client.get("/api/requisitions").json()
        assert len(rows) == 5
        assert rows[0]["folio"] == "REQ-2024-005"

    def test_list_by_display_status(self, client):
        rows = client.get("/api/requisitions", params={"status": "Pendiente de Revisión"}).json()
        assert [r["id"] for r in rows] == ["1"]
        assert rows[0]["status"] == "pendiente_revision"

    def test_invalid_status_filter(self, client):
        r = client.get("/api/requisitions", params={"status": "archivada"})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_STATUS"

    def test_summary(self, client):
        summary = client.get("/api/requisitions/summary").json()
        assert summary == {
            "in_capture": 1,
            "pending_review": 1,
            "in_authorization": 1,
            "returned_for_correction": 1,
            "authorized": 1,
        }

    def test_update_status(self, client):
        r = client.patch("/api/requisitions/3/status", json={"status": "pendiente_revision"})
        assert r.status_code == 200
        assert r.json()["status_label"] == "Pendiente de Revisión"
        assert client.get("/api/requisitions/summary").json()["pending_review"] == 2

    def test_get_missing_record(self, client):
        r = client.get("/api/requisitions/999")
        assert r.status_code == 404
        assert r.json()["code"] == "REQUISITION_NOT_FOUND"

    def test_save_guarantees(self, client):
        r = client.put(
            "/api/requisitions/1/guarantees",
            json={"advance_applies": True, "advance_guarantee": "15%"},
        )
        assert r.status_code == 200
        record = client.get("/api/requisitions/1").json()
        assert record["guarantees"]["advance_applies"] is True
        assert record["guarantees"]["advance_guarantee"] == "15%"


class TestReviewRoutes:
    def test_open_review(self, client):
        dictamen = client.post("/api/review/1").json()
        assert len(dictamen["sections"]) == 6
        assert dictamen["disposition"] == "INCOMPLETE"
        assert dictamen["pending_sections"] == 6

    def test_open_missing(self, client):
        assert client.post("/api/review/999").status_code == 404

    def test_edit_without_session(self, client):
        r = client.put("/api/review/1/sections/1/state", json={"state": "aprobado"})
        assert r.status_code == 404
        assert r.json()["code"] == "REVIEW_SESSION_NOT_FOUND"

    def test_section_number_out_of_range(self, client):
        client.post("/api/review/1")
        r = client.put("/api/review/1/sections/7/state", json={"state": "aprobado"})
        assert r.status_code == 422

    def test_toggle_twice_deselects(self, client):
        client.post("/api/review/1")
        _approve(client, "1", [2, 2])
        dictamen = client.get("/api/review/1").json()
        assert dictamen["sections"][1]["state"] == "sin_dictaminar"

    def test_authorize_flow(self, client):
        client.post("/api/review/1")
        _approve(client, "1", range(1, 7))

        r = client.post("/api/review/1/authorize", json={"reviewer": "Juan Pérez García"})

        assert r.status_code == 200
        assert r.json()["status"] == "autorizada"
        record = client.get("/api/requisitions/1").json()
        assert record["status"] == "autorizada"
        assert record["dictamen_sections"]["section_4"] == {"state": "aprobado", "observaciones": ""}

    def test_return_flow(self, client):
        client.post("/api/review/1")
        _approve(client, "1", [1, 2, 4, 5, 6])
        client.put("/api/review/1/sections/3/state", json={"state": "rechazado"})
        client.put("/api/review/1/sections/3/comment", json={"comment": "Falta firma"})

        blocked = client.post("/api/review/1/authorize")
        assert blocked.status_code == 422
        assert blocked.json()["kind"] == FailureKind.VALIDATION.value

        r = client.post("/api/review/1/return")
        assert r.status_code == 200
        record = client.get("/api/requisitions/1").json()
        assert record["status"] == "devuelta"
        assert record["observations_summary"] == "Resumen Financiero: Falta firma"

    def test_return_with_blank_comment(self, client):
        client.post("/api/review/1")
        client.put("/api/review/1/sections/2/state", json={"state": "rechazado"})

        r = client.post("/api/review/1/return")

        assert r.status_code == 422
        assert "comments incomplete" in r.json()["message"]
        assert client.get("/api/requisitions/1").json()["status"] == "pendiente_revision"

    def test_store_failure_is_distinguishable(self, client, monkeypatch):
        client.post("/api/review/1")
        _approve(client, "1", range(1, 7))

        def _boom(*args, **kwargs):
            raise StoreError("timeout writing requisiciones")

        monkeypatch.setattr(deps.get_repository(), "update", _boom)
        r = client.post("/api/review/1/authorize")

        assert r.status_code == 502
        assert r.json()["kind"] == FailureKind.STORE.value
        assert r.json()["message"] == "timeout writing requisiciones"
        # Session survives so the reviewer can retry
        assert client.get("/api/review/1").json()["disposition"] == "READY_TO_AUTHORIZE"

    def test_authorize_after_return_clears_summary(self, client):
        client.post("/api/review/1")
        client.put("/api/review/1/sections/3/state", json={"state": "rechazado"})
        client.put("/api/review/1/sections/3/comment", json={"comment": "Falta firma"})
        assert client.post("/api/review/1/return").status_code == 200

        client.post("/api/review/1")
        _approve(client, "1", range(1, 7))
        assert client.post("/api/review/1/authorize").status_code == 200

        record = client.get("/api/requisitions/1").json()
        assert record["status"] == "autorizada"
        assert record["observations_summary"] == ""

    def test_discard_review(self, client):
        client.post("/api/review/1")

        assert client.delete("/api/review/1").status_code == 204
        assert client.get("/api/review/1").status_code == 404
        assert client.delete("/api/review/1").status_code == 404
