"""Tests for the HTTP API."""

import base64
import io

import openpyxl
import pytest
from fastapi.testclient import TestClient

from api.main import app


def _payload(**overrides) -> dict:
    payload = {
        "title": "Test Quote Document",
        "extra_costs": "55",
        "cost_deductions": "10",
        "print_date": "2026-10-19",
        "sections": [
            {
                "title": "S1",
                "items": [
                    {"description": "Pipe", "quantity": 1, "unit_labour_cost": "400",
                     "unit_material_cost": "500", "labour_hours": "20"},
                ],
            },
            {
                "title": "S2",
                "items": [
                    {"description": "Valve", "quantity": 1, "unit_labour_cost": "500",
                     "unit_material_cost": "600", "labour_hours": "24"},
                ],
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def client():
    return TestClient(app)


class TestAPI:
    def test_health(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_root(self, client):
        body = client.get("/").json()
        assert body["name"] == "Quote Printer API"
        assert body["render"] == "/api/v1/render"
        assert body["renderers"] == ["xlsx"]

    def test_render(self, client):
        resp = client.post("/api/v1/render", json=_payload())
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["summary"]["total_cost"] == "2045"
        assert body["summary"]["total_labour_hours"] == "44"
        assert [s["total_cost"] for s in body["summary"]["sections"]] == ["900", "1100"]
        assert len(body["document"]["pages"]) == 3

        wb = openpyxl.load_workbook(io.BytesIO(base64.b64decode(body["excel_base64"])))
        assert wb.sheetnames == ["Summary", "S1", "S2"]

    def test_render_without_excel(self, client):
        resp = client.post("/api/v1/render", params={"include_excel": "false"}, json=_payload())
        body = resp.json()
        assert body["success"] is True
        assert body["excel_base64"] is None

    def test_empty_quote(self, client):
        resp = client.post("/api/v1/render", json=_payload(sections=[]))
        body = resp.json()
        assert body["success"] is True
        assert body["summary"]["total_cost"] == "45"
        assert len(body["document"]["pages"]) == 1

    def test_negative_quantity(self, client):
        payload = _payload()
        payload["sections"][0]["items"][0]["quantity"] = -1
        body = client.post("/api/v1/render", json=payload).json()
        assert body["success"] is False
        assert body["error_type"] == "validation_error"
        assert any("non-negative" in e for e in body["errors"])

    def test_strict_inconsistent_costs(self, client):
        payload = _payload(strict=True)
        payload["sections"][0]["items"][0]["labour_cost"] = "1"
        body = client.post("/api/v1/render", json=payload).json()
        assert body["success"] is False
        assert any("does not match" in e for e in body["errors"])

    def test_schema_error(self, client):
        resp = client.post("/api/v1/render", json={"sections": []})
        assert resp.status_code == 422
