# tests/test_api_basic.py
import pytest
import httpx

from imagegate.api.routers import generate as generate_router
from imagegate.providers.base import BackendError, UnsupportedOperationError
from imagegate.schemas.generation import GenerationResult

BODY = {"request": {"prompt": "a cat", "modelId": "model-a", "n": 2}, "settings": {"accountId": "a", "apiKey": "k"}}


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert "cloudflare" in r.json()["providers"]

@pytest.mark.asyncio
async def test_providers_lists_active_settings_variant(client):
    r = await client.get("/providers")
    assert r.status_code == 200
    cf = next(p for p in r.json() if p["id"] == "cloudflare")
    assert cf["enabledByDefault"] is True
    assert [s["key"] for s in cf["settings"]] == ["accountId", "apiKey"]
    assert cf["settings"][0]["type"] == "password"
    assert any(m["supportedAspectRatios"] for m in cf["models"])

@pytest.mark.asyncio
async def test_generate_ok(client, monkeypatch):
    async def fake_generate(request, settings, capabilities, provider_id=None):
        assert request.image_count == 2
        assert settings == {"accountId": "a", "apiKey": "k"}
        return GenerationResult(images=["data:image/png;base64,AA==", "data:image/png;base64,AA=="])
    monkeypatch.setattr(generate_router, "generate_images", fake_generate)
    r = await client.post("/generate", json=BODY)
    assert r.status_code == 200
    assert r.json() == {"images": ["data:image/png;base64,AA==", "data:image/png;base64,AA=="]}

@pytest.mark.asyncio
async def test_generate_config_error_is_200(client):
    # Real provider, no credentials: reported, not raised, and no network call made.
    body = {"request": {"prompt": "a cat", "modelId": "@cf/lykon/dreamshaper-8-lcm"}, "settings": {}}
    r = await client.post("/generate", json=body)
    assert r.status_code == 200
    assert r.json() == {"images": [], "errorReason": "CONFIG_ERROR"}

@pytest.mark.asyncio
async def test_unknown_provider_404(client):
    r = await client.post("/generate", json={**BODY, "provider": "nope"})
    assert r.status_code == 404

@pytest.mark.asyncio
async def test_unsupported_operation_400(client, monkeypatch):
    async def fake_generate(*args, **kwargs):
        raise UnsupportedOperationError("model requires a reference image")
    monkeypatch.setattr(generate_router, "generate_images", fake_generate)
    r = await client.post("/generate", json=BODY)
    assert r.status_code == 400

@pytest.mark.asyncio
async def test_backend_error_502(client, monkeypatch, caplog_info):
    async def fake_generate(*args, **kwargs):
        raise BackendError(500, "Internal Server Error", "boom", provider="cloudflare")
    monkeypatch.setattr(generate_router, "generate_images", fake_generate)
    r = await client.post("/generate", json=BODY)
    assert r.status_code == 502
    assert r.json()["detail"] == {"status": 500, "statusText": "Internal Server Error", "body": "boom"}
    assert "backend error from cloudflare" in "\n".join(rec.getMessage() for rec in caplog_info.records)

@pytest.mark.asyncio
async def test_transport_error_502(client, monkeypatch):
    async def fake_generate(*args, **kwargs):
        raise httpx.ConnectError("refused")
    monkeypatch.setattr(generate_router, "generate_images", fake_generate)
    r = await client.post("/generate", json=BODY)
    assert r.status_code == 502

@pytest.mark.asyncio
async def test_validation_422(client):
    r = await client.post("/generate", json={"request": {"prompt": "", "modelId": "x"}})
    assert r.status_code == 422
    r = await client.post("/generate", json={"request": {"prompt": "a cat", "modelId": "x", "n": 0}})
    assert r.status_code == 422

@pytest.mark.asyncio
async def test_unexpected_failure_logged_and_500(client, monkeypatch, caplog_info):
    async def fake_generate(*args, **kwargs):
        raise TypeError("Backend result has no base64 'image' field")
    monkeypatch.setattr(generate_router, "generate_images", fake_generate)
    r = await client.post("/generate", json=BODY)
    assert r.status_code == 500
    assert r.json()["detail"] == "image generation failed"
    assert "generation failed" in "\n".join(rec.getMessage() for rec in caplog_info.records)
