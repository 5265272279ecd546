import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import API_KEY, FakeUpstream
from openai_relay.app import create_app
from openai_relay.shared.config import AppConfig, OpenAIConfig

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, PUT, DELETE, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}


def build_client(upstream: FakeUpstream, api_key=API_KEY) -> TestClient:
    """The app's lifespan owns the single mock-backed client and closes it on exit."""
    config = AppConfig(openai=OpenAIConfig(
        api_key=api_key,
        api_key_source="environment" if api_key else "unset",
        base_url="https://api.openai.test/v1",
    ))
    return TestClient(create_app(config, http_client=upstream.client()))


@pytest.fixture
def client(upstream):
    with build_client(upstream) as test_client:
        yield test_client


def test_post_relays_chat_completion(client, upstream):
    resp = client.post("/", json={"messages": [{"role": "user", "content": "hi"}]})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "content": "hello",
        "model": "gpt-4o-mini",
        "usage": {"total_tokens": 5},
    }
    assert resp.headers["content-type"] == "application/json"
    for name, value in CORS.items():
        assert resp.headers[name] == value
    assert len(upstream.requests) == 1


def test_any_path_reaches_relay(client, upstream):
    resp = client.post("/functions/v1/ai-openai", json={"messages": [{"role": "user", "content": "hi"}]})

    assert resp.status_code == 200
    assert resp.json()["content"] == "hello"


def test_empty_messages_returns_400_envelope(client, upstream):
    resp = client.post("/", json={"messages": []})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "messages array is required"}
    assert upstream.requests == []


def test_get_without_body_is_rejected(client, upstream):
    resp = client.get("/")

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert upstream.requests == []


def test_options_preflight_without_credential():
    upstream = FakeUpstream()
    with build_client(upstream, api_key=None) as test_client:
        resp = test_client.options("/")

    assert resp.status_code == 200
    assert resp.content == b""
    for name, value in CORS.items():
        assert resp.headers[name] == value


def test_missing_credential_returns_configuration_error():
    upstream = FakeUpstream()
    with build_client(upstream, api_key=None) as test_client:
        resp = test_client.post("/", json={"messages": [{"role": "user", "content": "hi"}]})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "OpenAI API key not configured"}
    assert upstream.requests == []


def test_request_id_is_echoed(client):
    resp = client.options("/", headers={"X-Request-ID": "req-123"})

    assert resp.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in resp.headers


def test_health_reports_credential_and_upstream(client, upstream):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {
        "status": "ok",
        "services": {"credential": "configured", "openai_api": "up"},
    }
    assert upstream.requests[-1].method == "HEAD"


def test_health_reports_unreachable_upstream():
    upstream = FakeUpstream(exc=httpx.ConnectError("connection refused"))
    with build_client(upstream) as test_client:
        resp = test_client.get("/health")

    assert resp.json() == {
        "status": "error",
        "services": {"credential": "configured", "openai_api": "down"},
    }


def test_config_status_masks_key(client):
    resp = client.get("/config/status")

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "openai": {
            "isConfigured": True,
            "source": "environment",
            "maskedKey": "sk-test...1234",
        },
    }
    assert API_KEY not in resp.text


def test_metrics_exposes_relay_counters(client):
    client.post("/", json={"messages": []})

    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert 'relay_requests_total{outcome="validation"}' in resp.text


def test_shared_http_client_is_reused_and_closed(upstream):
    config = AppConfig(openai=OpenAIConfig(api_key=API_KEY, base_url="https://api.openai.test/v1"))
    http_client = upstream.client()
    app = create_app(config, http_client=http_client)

    with TestClient(app) as test_client:
        test_client.post("/", json={"messages": [{"role": "user", "content": "hi"}]})
        test_client.get("/health")
        assert app.state.http_client is http_client
        assert not http_client.is_closed

    assert http_client.is_closed
    assert len(upstream.requests) == 2


def test_request_log_line_includes_relay_outcome(client, caplog):
    with caplog.at_level(logging.INFO, logger="openai-relay"):
        client.post("/", json={"messages": []}, headers={"X-Request-ID": "req-456"})

    assert any(
        "POST / -> 400" in record.getMessage()
        and "req-456" in record.getMessage()
        and "relay validation" in record.getMessage()
        for record in caplog.records
    )


def test_config_test_reports_working_key(client, upstream):
    resp = client.post("/config/test")

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "configured": True,
        "source": "environment",
        "maskedKey": "sk-test...1234",
        "message": "OpenAI API key is valid and working",
    }
    sent = upstream.requests[-1]
    assert sent.method == "GET"
    assert str(sent.url) == "https://api.openai.test/v1/models"
    assert sent.headers["Authorization"] == f"Bearer {API_KEY}"


def test_config_test_without_key_skips_upstream():
    upstream = FakeUpstream()
    with build_client(upstream, api_key=None) as test_client:
        resp = test_client.post("/config/test")

    assert resp.json() == {
        "success": False,
        "configured": False,
        "error": "OpenAI API key not configured",
    }
    assert upstream.requests == []


@pytest.mark.parametrize("status_code, error_body", [
    (401, {"error": {"message": "Incorrect API key provided", "code": "invalid_api_key"}}),
    (401, {}),
    (403, {"error": {"message": "denied", "code": "invalid_api_key"}}),
])
def test_config_test_reports_rejected_key(status_code, error_body):
    upstream = FakeUpstream(status_code=status_code, json_body=error_body)
    with build_client(upstream) as test_client:
        resp = test_client.post("/config/test")

    assert resp.json() == {
        "success": False,
        "configured": True,
        "error": "Invalid API key",
        "errorType": "auth",
    }


def test_config_test_reports_upstream_failure_as_connection_error():
    upstream = FakeUpstream(status_code=500, json_body={"error": {"message": "The server had an error"}})
    with build_client(upstream) as test_client:
        resp = test_client.post("/config/test")

    assert resp.json() == {
        "success": False,
        "configured": True,
        "error": "The server had an error",
        "errorType": "connection",
    }


def test_config_test_reports_unreachable_upstream():
    upstream = FakeUpstream(exc=httpx.ConnectError("connection refused"))
    with build_client(upstream) as test_client:
        resp = test_client.post("/config/test")

    data = resp.json()
    assert data["success"] is False
    assert data["errorType"] == "connection"
    assert data["error"].startswith("Request to OpenAI API failed")
