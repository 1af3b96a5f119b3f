from fastapi.testclient import TestClient

from paysession.api_gateway.main import create_app

URL = "/api/create-payment-session"
VALID = {"amount": "25.5", "currency": "usd", "description": "Gift card"}


def test_correlation_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Correlation-Id": "req_from_client"})
    assert resp.headers["X-Correlation-Id"] == "req_from_client"


def test_correlation_id_is_generated(client):
    resp = client.get("/health")
    assert resp.headers["X-Correlation-Id"].startswith("req_")


def test_api_key_gate_disabled_by_default(client):
    assert client.post(URL, json=VALID).status_code == 200


def test_api_key_gate_rejects_missing_key(settings, transport, provider):
    settings = settings.model_copy(update={"proxy_api_keys": ["k1", "k2"]})
    client = TestClient(create_app(settings, transport=transport))

    resp = client.post(URL, json=VALID)

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or missing API key"}
    assert provider.token_calls == []


def test_api_key_gate_accepts_configured_key(settings, transport):
    settings = settings.model_copy(update={"proxy_api_keys": ["k1", "k2"]})
    client = TestClient(create_app(settings, transport=transport))

    resp = client.post(URL, json=VALID, headers={"X-API-Key": "k2"})

    assert resp.status_code == 200


def test_api_key_gate_leaves_reads_open(settings, transport):
    settings = settings.model_copy(update={"proxy_api_keys": ["k1"]})
    client = TestClient(create_app(settings, transport=transport))

    assert client.get("/health").status_code == 200
    assert client.get("/api/payment-config").status_code == 200


def test_cors_preflight(client):
    resp = client.options(
        URL,
        headers={"Origin": "https://shop.example.com", "Access-Control-Request-Method": "POST"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] in ("*", "https://shop.example.com")
