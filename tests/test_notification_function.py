"""
Tests for the application-result email function (Resend mocked with httpx.MockTransport).
"""

import json

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dancelink.functions.send_application_notification import ResendClient, app, get_resend
from dancelink.schemas.notification import NotificationPayload
from dancelink.services.email_templates import render_notification

PAYLOAD = {
    "dancerEmail": "dana@example.com",
    "dancerName": "Dana",
    "eventName": "Spring Gala",
    "status": "approved",
    "organizerName": "Olivia",
}


@pytest.fixture
def sent():
    return []


@pytest.fixture
def provider_status():
    return {"code": 200}


@pytest_asyncio.fixture
async def function_client(sent, provider_status):
    def handler(request: httpx.Request) -> httpx.Response:
        sent.append({"url": str(request.url), "auth": request.headers["authorization"], **json.loads(request.content)})
        if provider_status["code"] != 200:
            return httpx.Response(provider_status["code"], json={"message": "provider down"})
        return httpx.Response(200, json={"id": "email_123"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_resend] = lambda: ResendClient("re_test_key", "https://api.resend.test/", http=http)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await http.aclose()


@pytest.mark.asyncio
async def test_preflight_returns_cors_headers(function_client: AsyncClient):
    response = await function_client.options("/")

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "content-type" in response.headers["access-control-allow-headers"]


@pytest.mark.asyncio
async def test_approved_email(function_client: AsyncClient, sent):
    response = await function_client.post("/", json=PAYLOAD)

    assert response.status_code == 200
    assert response.json() == {"id": "email_123"}
    assert response.headers["access-control-allow-origin"] == "*"

    email = sent[0]
    assert email["url"] == "https://api.resend.test/emails"
    assert email["auth"] == "Bearer re_test_key"
    assert email["to"] == ["dana@example.com"]
    assert email["subject"] == "🎉 Your application for Spring Gala has been approved!"
    assert "Olivia" in email["html"]


@pytest.mark.asyncio
async def test_rejected_email(function_client: AsyncClient, sent):
    response = await function_client.post("/", json={**PAYLOAD, "status": "rejected"})

    assert response.status_code == 200
    assert sent[0]["subject"] == "Application Update for Spring Gala"
    assert "Dear Dana" in sent[0]["html"]


@pytest.mark.asyncio
async def test_provider_error_is_500(function_client: AsyncClient, provider_status):
    provider_status["code"] = 502

    response = await function_client.post("/", json=PAYLOAD)

    assert response.status_code == 500
    assert "error" in response.json()
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_invalid_payload_is_500(function_client: AsyncClient, sent):
    response = await function_client.post("/", json={**PAYLOAD, "dancerEmail": "not-an-email"})

    assert response.status_code == 500
    assert sent == []


@pytest.mark.asyncio
async def test_missing_api_key_is_500():
    app.dependency_overrides[get_resend] = lambda: ResendClient(None, "https://api.resend.test")
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post("/", json=PAYLOAD)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "RESEND_API_KEY is not set"}


def test_template_escapes_names():
    payload = NotificationPayload.model_validate({**PAYLOAD, "dancerName": "<script>x</script>"})

    subject, html = render_notification(payload)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Spring Gala" in subject
