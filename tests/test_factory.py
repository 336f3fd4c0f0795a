# tests/test_factory.py
import pytest

from imagegate.providers import factory
from imagegate.providers.base import ProviderNotFoundError
from imagegate.providers.cloudflare import CloudflareProvider


def test_cloudflare_registered():
    provider = factory.get_provider("cloudflare")
    assert isinstance(provider, CloudflareProvider)
    assert provider.name == "Cloudflare AI"
    assert provider.enabled_by_default is True

def test_unknown_provider():
    with pytest.raises(ProviderNotFoundError):
        factory.get_provider("nope")

def test_duplicate_registration_rejected():
    with pytest.raises(ValueError):
        factory.register_provider(CloudflareProvider)

def test_model_catalog():
    models = {m.id: m for m in factory.get_provider("cloudflare").models}
    assert "@cf/black-forest-labs/flux-1-schnell" in models
    assert models["@cf/black-forest-labs/flux-1-schnell"].supported_aspect_ratios is None
    assert models["@cf/runwayml/stable-diffusion-v1-5-img2img"].enabled_by_default is False
    enabled = [m for m in models.values() if m.enabled_by_default]
    assert len(enabled) == 5
