from typing import Any, Dict, Optional

from imagegate.core import config
from imagegate.core.context import RuntimeCapabilities
from imagegate.providers.factory import get_provider
from imagegate.schemas.generation import GenerationRequest, GenerationResult


async def generate_images(
    request: GenerationRequest,
    settings: Optional[Dict[str, Any]],
    capabilities: RuntimeCapabilities,
    provider_id: Optional[str] = None,
) -> GenerationResult:
    provider = get_provider(provider_id or config.DEFAULT_PROVIDER)
    return await provider.generate(request, settings, capabilities)
