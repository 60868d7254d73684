"""
Tests for health, mocked license endpoints and cross-cutting middleware.
"""

import time


def test_root(client):
    body = client.get("/").json()

    assert body["status"] == "running"
    assert body["version"] == "1.0.0"
    assert "timestamp" in body


def test_health_reports_sandbox(client):
    assert client.get("/health").json() == {
        "status": "healthy",
        "paypal_configured": True,
        "paypal_mode": "sandbox",
    }


def test_security_headers_and_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Request-ID"] == "req-123"


def test_cors_preflight_from_extension(client):
    response = client.options(
        "/api/paypal/create-subscription",
        headers={
            "Origin": "chrome-extension://abcdef",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        }
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_get_api_key(client):
    before = int(time.time())
    body = client.post("/api/get-api-key", json={"userId": "u-1"}).json()

    assert body["success"] is True
    assert body["api_key"] == "sk-YOUR_DEEPSEEK_API_KEY"
    assert body["expires"] >= before + 30 * 24 * 3600


def test_lemonsqueezy_activate_echoes_key(client):
    body = client.post("/api/lemonsqueezy/activate", json={"license_key": "LK-1", "instance_name": "x"}).json()

    assert body == {"activated": True, "license_key": {"status": "active", "key": "LK-1"}, "meta": {}}


def test_lemonsqueezy_activate_form_body(client):
    """Test form-encoded bodies are accepted like the real API."""
    body = client.post("/api/lemonsqueezy/activate", data={"license_key": "LK-2"}).json()

    assert body["license_key"]["key"] == "LK-2"


def test_lemonsqueezy_validate(client):
    assert client.post("/api/lemonsqueezy/validate", json={"license_key": "LK-1"}).json() == {
        "valid": True,
        "meta": {},
    }


def test_gumroad_verify(client):
    body = client.post("/api/gumroad/verify", data={"product_permalink": "p", "license_key": "k"}).json()

    assert body["success"] is True
    assert body["purchase"]["email"] == "activated@example.com"
    assert body["purchase"]["created_at"]


def test_license_endpoints_accept_empty_body(client):
    response = client.post("/api/lemonsqueezy/activate")

    assert response.status_code == 200
    assert response.json()["license_key"]["key"] is None


def limited_client(settings, gateway=None, **overrides):
    from fastapi.testclient import TestClient

    from api.app import create_app
    from billing.service import SubscriptionService

    app = create_app(settings.model_copy(update={"rate_limit_enabled": True, **overrides}))
    if gateway is not None:
        app.state.subscription_service = SubscriptionService(gateway)
    return TestClient(app)


def test_rate_limit_comes_from_app_settings(settings, gateway):
    """Test the limit given to create_app is the one enforced."""
    client = limited_client(settings, gateway, rate_limit="1/minute")
    statuses = [client.post("/api/paypal/validate-subscription", json={}).status_code for _ in range(3)]

    assert statuses == [400, 429, 429]
    assert gateway.calls == []


def test_rate_limit_uniform_body(settings, gateway):
    """Test the 429 answer uses the uniform error shape and keeps CORS headers."""
    client = limited_client(settings, gateway, rate_limit="2/minute")
    responses = [
        client.post(
            "/api/paypal/create-subscription",
            json={},
            headers={"Origin": "chrome-extension://abcdef"}
        )
        for _ in range(3)
    ]

    assert [r.status_code for r in responses] == [400, 400, 429]
    assert responses[-1].json() == {"success": False, "error": "Too many requests. Try again later."}
    assert responses[-1].headers["access-control-allow-origin"] == "*"


def test_rate_limit_switch_is_per_app(settings, gateway):
    """Test a disabled app is unaffected by a limited app in the same process."""
    limited = limited_client(settings, gateway, rate_limit="1/minute")
    open_client = limited_client(settings, gateway, rate_limit="1/minute", rate_limit_enabled=False)

    limited.post("/api/paypal/validate-subscription", json={})
    assert limited.post("/api/paypal/validate-subscription", json={}).status_code == 429

    statuses = [open_client.post("/api/paypal/validate-subscription", json={}).status_code for _ in range(3)]
    assert statuses == [400, 400, 400]


def test_rate_limit_applies_to_ai_proxy(settings):
    client = limited_client(settings, rate_limit="1/minute")
    client.post("/api/ai/chat/completions", json={})

    assert client.post("/api/ai/chat/completions", json={}).status_code == 429


def test_webhook_and_health_are_not_rate_limited(settings):
    client = limited_client(settings, rate_limit="1/minute")

    webhook = [client.post("/api/paypal/webhook", json={"event_type": "X"}).status_code for _ in range(3)]
    health = [client.get("/health").status_code for _ in range(3)]

    assert webhook == [200, 200, 200]
    assert health == [200, 200, 200]
