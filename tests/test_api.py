"""HTTP adapter tests using FastAPI's TestClient."""

from pathlib import Path
import sys

from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from server.api import app

client = TestClient(app)

PAYLOAD = {
    "inventory": [
        {"id": "tee", "category": "tops", "color": ["white"], "style": "casual", "occasion": ["casual"], "tags": ["light"]},
        {"id": "shorts", "category": "bottoms", "color": ["khaki"], "style": "casual", "occasion": ["casual"], "tags": ["shorts"]},
        {"id": "parka", "category": "outerwear", "color": ["olive"], "style": "casual", "occasion": ["casual"], "tags": ["heavy"]},
    ],
    "profile": {"id": "api-user", "preferred_style": "casual"},
    "context": {"occasion": "casual", "weather": {"temperature": 28, "condition": "clear"}},
    "include_accessories": False,
}


def test_healthcheck() -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_recommendations_endpoint_excludes_outerwear_when_hot() -> None:
    response = client.post("/recommendations", json=PAYLOAD)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert 1 <= len(body["recommendations"]) <= 6
    for outfit in body["recommendations"]:
        assert all(item["category"] != "outerwear" for item in outfit["items"])
    assert "parka" in body["diagnostics"]["weather_removed"]


def test_invalid_payload_returns_422_review() -> None:
    response = client.post("/recommendations", json={"inventory": [], "profile": {}, "context": {}})
    assert response.status_code == 422
    assert response.json()["status"] == "needs_review"


def test_session_reset_endpoint() -> None:
    client.post("/recommendations", json=PAYLOAD)
    assert client.delete("/sessions/api-user").status_code == 200
    assert client.delete("/sessions/api-user").status_code == 404
