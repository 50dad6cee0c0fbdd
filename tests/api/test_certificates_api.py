"""Tests for certificate API endpoints."""

from __future__ import annotations

from tests.api.fake_backend import VALIDATION_URL

TEMPLATE = {
    "name": "Noite dos Museus",
    "backgroundUrl": "https://cdn.test/bg.png",
    "elements": [
        {"id": "who", "type": "variable", "x": 100, "y": 200, "text": "{{nome_visitante}}"},
        {"id": "when", "type": "variable", "x": 100, "y": 260, "text": "em {{data_conclusao}}"},
        {"id": "qr", "type": "qrcode", "x": 700, "y": 450, "width": 100, "height": 100},
    ],
}


class TestValidation:
    async def test_valid(self, client, backend):
        backend.certificates["CV-42"] = {"visitorName": "Maria Oliveira"}
        resp = await client.get("/api/certificates/CV-42/validation")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "valid"
        assert data["is_valid"]
        assert data["data"]["visitor_name"] == "Maria Oliveira"

    async def test_revoked(self, client, backend):
        backend.certificates["CV-7"] = {"visitorName": "João", "revoked": True}
        data = (await client.get("/api/certificates/CV-7/validation")).json()
        assert data["status"] == "revoked"
        assert not data["is_valid"]

    async def test_unknown_code(self, client):
        data = (await client.get("/api/certificates/NOPE/validation")).json()
        assert data["status"] == "invalid"
        assert data["data"] is None

    async def test_backend_down(self, client, backend):
        backend.certificate_status = 500
        resp = await client.get("/api/certificates/CV-42/validation")
        assert resp.status_code == 502


class TestPreview:
    async def test_with_explicit_values(self, client):
        resp = await client.post(
            "/api/certificates/templates/preview",
            json={"template": TEMPLATE, "values": {"nome_visitante": "Ana", "code": "X1"}},
        )
        assert resp.status_code == 200
        data = resp.json()
        contents = {e["id"]: e["content"] for e in data["elements"]}
        assert contents["who"] == "Ana"
        assert contents["when"] == "em {{data_conclusao}}"
        assert contents["qr"] == f"{VALIDATION_URL}/X1"
        assert data["unresolved_tokens"] == ["data_conclusao"]

    async def test_values_from_certificate(self, client, backend):
        backend.certificates["CV-42"] = {
            "visitorName": "Maria Oliveira",
            "issuedAt": "2025-05-18T21:00:00Z",
        }
        resp = await client.post(
            "/api/certificates/templates/preview", json={"template": TEMPLATE, "code": "CV-42"}
        )
        contents = {e["id"]: e["content"] for e in resp.json()["elements"]}
        assert contents["who"] == "Maria Oliveira"
        assert contents["when"] == "em 18/05/2025"
        assert contents["qr"] == f"{VALIDATION_URL}/CV-42"

    async def test_unknown_certificate(self, client):
        resp = await client.post(
            "/api/certificates/templates/preview", json={"template": TEMPLATE, "code": "NOPE"}
        )
        assert resp.status_code == 404

    async def test_strict_missing_variable(self, client):
        resp = await client.post(
            "/api/certificates/templates/preview",
            json={"template": TEMPLATE, "values": {"code": "X1"}, "strict": True},
        )
        assert resp.status_code == 422

    async def test_variables(self, client):
        resp = await client.get("/api/certificates/templates/variables")
        assert "nome_visitante" in resp.json()


class TestHealth:
    async def test_health(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
