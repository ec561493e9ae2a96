"""
Tests for the HTTP surface: schema, validate, plan, apply, read, destroy and audit.
"""
import jwt
import pytest
from fastapi.testclient import TestClient

from jwt_provider.main import app
from jwt_provider.schema import SENSITIVE_MARKER

ADDRESS = "jwt_hashed_token.api"
CONFIG = {"algorithm": "HS256", "secret_base64": "c2VjcmV0", "claims_json": '{"sub":"alice"}'}


@pytest.fixture
def client(fresh_db):
    return TestClient(app)


def _error(r) -> str:
    return r.json()["detail"]["error"]


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "jwt_provider"}


def test_schema(client):
    r = client.get("/schema")
    assert r.status_code == 200
    attrs = r.json()["resource_schemas"]["jwt_hashed_token"]["attributes"]
    assert attrs["algorithm"]["default"] == "HS512"
    assert attrs["claims_json"]["required"] is True


def test_validate_reports_errors(client):
    r = client.post("/validate/jwt_hashed_token", json={"config": {"algorithm": "RS256", "claims_json": "{}"}})
    assert r.status_code == 200
    data = r.json()
    assert data["valid"] is False
    kinds = {e["attribute"]: e["error"] for e in data["errors"]}
    assert kinds == {"algorithm": "unsupported_algorithm", "secret_base64": "invalid_attribute"}


def test_validate_ok(client):
    r = client.post("/validate/jwt_hashed_token", json={"config": CONFIG})
    assert r.json() == {"valid": True, "warnings": [], "errors": []}


def test_validate_unknown_type(client):
    r = client.post("/validate/jwt_other", json={"config": {}})
    assert r.status_code == 404
    assert _error(r) == "unknown_resource_type"


def test_plan_before_apply(client):
    r = client.post(f"/plan/{ADDRESS}", json={"config": CONFIG})
    assert r.status_code == 200
    data = r.json()
    assert data["action"] == "create"
    assert data["changes"]["secret_base64"]["after"] == SENSITIVE_MARKER
    assert "c2VjcmV0" not in r.text


def test_apply_read_destroy(client):
    r = client.put(f"/resources/{ADDRESS}", json={"config": CONFIG})
    assert r.status_code == 200
    data = r.json()
    assert data["action"] == "create"
    assert data["id"] == '{"sub":"alice"}'
    assert data["attributes"]["token"] == SENSITIVE_MARKER
    assert data["attributes"]["secret_base64"] == SENSITIVE_MARKER
    assert data["attributes"]["claims_json"] == '{"sub":"alice"}'

    r = client.get(f"/resources/{ADDRESS}")
    assert r.status_code == 200
    assert r.json()["attributes"]["token"] == SENSITIVE_MARKER

    r = client.get(f"/resources/{ADDRESS}", params={"show_sensitive": "true"})
    token = r.json()["attributes"]["token"]
    assert jwt.decode(token, b"secret", algorithms=["HS256"]) == {"sub": "alice"}

    r = client.get("/resources")
    assert [s["address"] for s in r.json()] == [ADDRESS]

    r = client.delete(f"/resources/{ADDRESS}")
    assert r.status_code == 200
    assert r.json() == {"address": ADDRESS, "destroyed": True}

    r = client.get(f"/resources/{ADDRESS}")
    assert r.status_code == 404
    assert _error(r) == "resource_not_found"
    r = client.delete(f"/resources/{ADDRESS}")
    assert r.status_code == 404


def test_reapply_is_noop_and_change_replaces(client):
    client.put(f"/resources/{ADDRESS}", json={"config": CONFIG})
    r = client.put(f"/resources/{ADDRESS}", json={"config": CONFIG})
    assert r.json()["action"] == "noop"

    r = client.post(f"/plan/{ADDRESS}", json={"config": dict(CONFIG, claims_json='{"sub":"bob"}')})
    assert r.json()["action"] == "replace"
    assert r.json()["forces_replacement"] == ["claims_json"]

    r = client.put(f"/resources/{ADDRESS}", json={"config": dict(CONFIG, claims_json='{"sub":"bob"}')})
    assert r.json()["action"] == "replace"
    assert r.json()["id"] == '{"sub":"bob"}'


def test_apply_rs256_rejected(client):
    r = client.put(f"/resources/{ADDRESS}", json={"config": dict(CONFIG, algorithm="RS256")})
    assert r.status_code == 400
    assert _error(r) == "unsupported_algorithm"
    assert "jwt_signed_token" in r.json()["detail"]["error_description"]
    assert client.get(f"/resources/{ADDRESS}").status_code == 404


def test_apply_malformed_inputs(client):
    r = client.put(f"/resources/{ADDRESS}", json={"config": dict(CONFIG, secret_base64="not-base64!")})
    assert r.status_code == 400
    assert _error(r) == "malformed_secret"
    assert "not-base64!" not in r.text

    r = client.put(f"/resources/{ADDRESS}", json={"config": dict(CONFIG, claims_json="{not json}")})
    assert r.status_code == 400
    assert _error(r) == "malformed_claims"
    assert client.get(f"/resources/{ADDRESS}").status_code == 404


def test_invalid_address(client):
    r = client.put("/resources/not-an-address", json={"config": CONFIG})
    assert r.status_code == 400
    assert _error(r) == "invalid_address"


def test_audit_has_no_secrets(client):
    r = client.put(f"/resources/{ADDRESS}", json={"config": CONFIG})
    client.put("/resources/jwt_hashed_token.bad", json={"config": dict(CONFIG, secret_base64="!!")})
    client.delete(f"/resources/{ADDRESS}")

    r = client.get("/audit")
    assert r.status_code == 200
    events = [(e["event_type"], e["outcome"]) for e in r.json()]
    assert events == [
        ("resource_destroyed", "success"),
        ("apply_failed", "fail"),
        ("resource_created", "success"),
    ]
    assert "c2VjcmV0" not in r.text
    assert "eyJ" not in r.text

    r = client.get("/audit", params={"outcome": "fail"})
    assert [e["address"] for e in r.json()] == ["jwt_hashed_token.bad"]
