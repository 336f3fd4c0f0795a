# tests/conftest.py
import os
import base64
import logging
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env (no edge runtime, REST by default)
os.environ.setdefault("EDGE_RUNTIME", "false")
os.environ.setdefault("PROVIDER_CLOUDFLARE_BUILTIN", "false")
os.environ.setdefault("CLOUDFLARE_API_BASE", "https://api.cloudflare.com/client/v4")

# IMPORTANT: import the app after envs are set
from imagegate.main import create_app
from imagegate.core.context import RuntimeCapabilities

API_BASE = "https://api.cloudflare.com/client/v4"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-bytes"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


class FakeBinding:
    """Stands in for the edge runtime's AI binding; records every call."""

    def __init__(self, make_result):
        self.make_result = make_result
        self.calls = []

    async def run(self, model_id, params):
        self.calls.append((model_id, params))
        return self.make_result()


@pytest.fixture
def rest_caps():
    return RuntimeCapabilities()


@pytest.fixture
def settings():
    return {"accountId": "acc", "apiKey": "secret-key"}


@pytest_asyncio.fixture
async def app():
    return create_app(RuntimeCapabilities())

@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog


@pytest.fixture(autouse=True)
def _reset_global_respx_router():
    # Routes added via the global ``respx.post`` inside a ``respx.mock(...)``
    # decorated test land on the global router without being cleared;
    # drop them so they cannot shadow later tests' routes.
    import respx

    yield
    respx.mock.clear()
