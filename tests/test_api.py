"""Tests for the FastAPI REST endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import create_app
from inttypes import INT8
from models import DisplayOptions
from session import CalculatorSession


@pytest.fixture
def signed_client():
    return TestClient(create_app(session=CalculatorSession(INT8, -1)))


# ---------------------------------------------------------------------------
# GET /calculator
# ---------------------------------------------------------------------------

class TestSnapshotEndpoint:

    def test_default(self, client):
        resp = client.get("/calculator")
        assert resp.status_code == 200
        data = resp.json()
        assert data["width"] == 64
        assert data["signed"] is False
        assert data["value"] == 0
        assert data["rendered"]["binary"] == "0" * 64
        assert data["display"]["binary"] == "0000"
        assert data["source"] == "none"

    def test_signed(self, signed_client):
        data = signed_client.get("/calculator").json()
        assert data["rendered"] == {
            "hexadecimal": "FF",
            "decimal": "-1",
            "octal": "377",
            "binary": "11111111",
        }

    def test_display_override(self):
        client = TestClient(create_app(display=DisplayOptions(hex_prefix=True)))
        data = client.get("/calculator").json()
        assert data["display"]["hexadecimal"] == "0x0"


# ---------------------------------------------------------------------------
# PUT /calculator/type
# ---------------------------------------------------------------------------

class TestTypeEndpoint:

    def test_resize(self, client):
        client.put("/calculator/value", json={"text": "5"})
        resp = client.put("/calculator/type", json={"width": 8, "signed": False})
        assert resp.status_code == 200
        data = resp.json()
        assert data["width"] == 8
        assert data["value"] == 5
        assert data["source"] == "resize"

    def test_unsupported_width_422(self, client):
        resp = client.put("/calculator/type", json={"width": 12, "signed": True})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# PUT /calculator/value
# ---------------------------------------------------------------------------

class TestValueEndpoint:

    def test_decimal(self, signed_client):
        resp = signed_client.put("/calculator/value", json={"text": "-128"})
        assert resp.status_code == 200
        assert resp.json()["rendered"]["binary"] == "10000000"

    def test_binary(self, client):
        resp = client.put(
            "/calculator/value", json={"text": "0b1010", "base": "binary"}
        )
        assert resp.json()["value"] == 10

    def test_hex(self, client):
        resp = client.put(
            "/calculator/value", json={"text": "ff", "base": "hexadecimal"}
        )
        assert resp.json()["value"] == 255

    def test_out_of_range_422(self, signed_client):
        resp = signed_client.put("/calculator/value", json={"text": "128"})
        assert resp.status_code == 422
        assert "out of range" in resp.json()["detail"]

    def test_bad_base_422(self, client):
        resp = client.put("/calculator/value", json={"text": "1", "base": "ternary"})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# /calculator/bits
# ---------------------------------------------------------------------------

class TestBitEndpoints:

    def test_read_bit(self, signed_client):
        resp = signed_client.get("/calculator/bits/7")
        assert resp.status_code == 200
        assert resp.json() == {"index": 7, "value": True}

    def test_set_bit(self, client):
        resp = client.put("/calculator/bits/63", json={"value": True})
        assert resp.status_code == 200
        data = resp.json()
        assert data["rendered"]["hexadecimal"] == "8000000000000000"
        assert data["bits"][63] is True
        assert data["source"] == "bit_field"

    def test_toggle(self, client):
        client.post("/calculator/bits/1/toggle")
        resp = client.post("/calculator/bits/0/toggle")
        assert resp.json()["value"] == 3

    @pytest.mark.parametrize("index", [8, -1])
    def test_out_of_range_404(self, signed_client, index):
        assert signed_client.get(f"/calculator/bits/{index}").status_code == 404
        resp = signed_client.put(f"/calculator/bits/{index}", json={"value": False})
        assert resp.status_code == 404
        resp = signed_client.post(f"/calculator/bits/{index}/toggle")
        assert resp.status_code == 404
        assert signed_client.get("/calculator").json()["value"] == -1


# ---------------------------------------------------------------------------
# POST /calculator/operations
# ---------------------------------------------------------------------------

class TestOperationEndpoint:

    def test_add(self, client):
        resp = client.post(
            "/calculator/operations", json={"operation": "add", "operand": 7}
        )
        assert resp.status_code == 200
        assert resp.json()["value"] == 7
        assert resp.json()["source"] == "operation"

    def test_negate_min(self):
        client = TestClient(create_app(session=CalculatorSession(INT8, -128)))
        resp = client.post("/calculator/operations", json={"operation": "negate"})
        assert resp.json()["value"] == -128

    def test_logical_shift_right(self):
        client = TestClient(create_app(session=CalculatorSession(INT8, -128)))
        resp = client.post(
            "/calculator/operations",
            json={"operation": "shift_right", "operand": 1},
        )
        assert resp.json()["rendered"]["binary"] == "01000000"

    def test_divide_by_zero_422(self, signed_client):
        resp = signed_client.post(
            "/calculator/operations", json={"operation": "divide", "operand": 0}
        )
        assert resp.status_code == 422
        assert signed_client.get("/calculator").json()["value"] == -1

    def test_missing_operand_422(self, client):
        resp = client.post("/calculator/operations", json={"operation": "add"})
        assert resp.status_code == 422

    def test_operand_out_of_range_422(self, signed_client):
        resp = signed_client.post(
            "/calculator/operations", json={"operation": "add", "operand": 1000}
        )
        assert resp.status_code == 422

    def test_unknown_operation_422(self, client):
        resp = client.post("/calculator/operations", json={"operation": "pow"})
        assert resp.status_code == 422
