# read-only registry of provider instances keyed by provider id
# lets us add backends later without touching endpoint logic

from typing import Dict, List, Type, TypeVar

from imagegate.providers.base import ImageProvider, ProviderNotFoundError

P = TypeVar("P", bound=Type[ImageProvider])

_REGISTRY: Dict[str, ImageProvider] = {}


def register_provider(cls: P) -> P:
    """Class decorator: instantiate the provider with its defaults and register it."""
    provider = cls()
    if not provider.id:
        raise ValueError(f"{cls.__name__} has no provider id")
    if provider.id in _REGISTRY:
        raise ValueError(f"Provider already registered: {provider.id}")
    _REGISTRY[provider.id] = provider
    return cls


def _load_builtin_providers() -> None:
    # importing a provider module registers it
    from imagegate.providers import cloudflare  # noqa: F401


def get_provider(provider_id: str) -> ImageProvider:
    _load_builtin_providers()
    provider = _REGISTRY.get(provider_id)
    if provider is None:
        raise ProviderNotFoundError(f"Unknown provider: {provider_id}", provider_id)
    return provider


def list_providers() -> List[ImageProvider]:
    _load_builtin_providers()
    return list(_REGISTRY.values())
