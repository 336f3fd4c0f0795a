# Cloudflare Workers AI image provider
# native path: the runtime's AI binding; REST path: /accounts/{accountId}/ai/run/{modelId}

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from imagegate.core import config
from imagegate.core.context import RuntimeCapabilities
from imagegate.providers.base import (
    BackendError,
    BackendParams,
    ConfigurationError,
    ImageProvider,
    Transport,
    build_params,
    choose_ability,
    find_model,
    select_transport,
)
from imagegate.providers.factory import register_provider
from imagegate.schemas.generation import GenerationRequest
from imagegate.schemas.provider import Ability, ModelDescriptor, SettingsField, SettingsKind
from imagegate.services.images import normalize_image

logger = logging.getLogger(__name__)

_COMMON_RATIOS = ("1:1", "16:9", "9:16", "4:3", "3:4")

EXTERNAL_SETTINGS = [
    SettingsField(key="accountId", kind=SettingsKind.SECRET, required=True),
    SettingsField(key="apiKey", kind=SettingsKind.SECRET, required=True),
]

BUILTIN_SETTINGS = [
    SettingsField(key="builtin", kind=SettingsKind.BOOLEAN, required=True, default=True),
    SettingsField(key="accountId", kind=SettingsKind.SECRET, required=False),
    SettingsField(key="apiKey", kind=SettingsKind.SECRET, required=False),
]


class CloudflareSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    builtin: Optional[bool] = None
    account_id: Optional[str] = Field(default=None, alias="accountId")
    api_key: Optional[str] = Field(default=None, alias="apiKey")


@register_provider
class CloudflareProvider(ImageProvider):
    id = "cloudflare"
    name = "Cloudflare AI"
    enabled_by_default = True
    settings_model = CloudflareSettings
    models = (
        ModelDescriptor(
            id="@cf/leonardo/lucid-origin",
            name="Lucid Origin",
            abilities=(Ability.TEXT_TO_IMAGE,),
            supported_aspect_ratios=_COMMON_RATIOS,
        ),
        ModelDescriptor(
            id="@cf/black-forest-labs/flux-1-schnell",
            name="FLUX.1-schnell",
            abilities=(Ability.TEXT_TO_IMAGE,),
        ),
        ModelDescriptor(
            id="@cf/lykon/dreamshaper-8-lcm",
            name="DreamShaper 8 LCM",
            abilities=(Ability.TEXT_TO_IMAGE,),
            supported_aspect_ratios=_COMMON_RATIOS,
        ),
        ModelDescriptor(
            id="@cf/bytedance/stable-diffusion-xl-lightning",
            name="Stable Diffusion XL Lightning",
            abilities=(Ability.TEXT_TO_IMAGE,),
            supported_aspect_ratios=_COMMON_RATIOS,
        ),
        ModelDescriptor(
            id="@cf/runwayml/stable-diffusion-v1-5-img2img",
            name="Stable Diffusion v1.5 Img2Img",
            abilities=(Ability.IMAGE_TO_IMAGE,),
            enabled_by_default=False,
        ),
        ModelDescriptor(
            id="@cf/stabilityai/stable-diffusion-xl-base-1.0",
            name="Stable Diffusion XL Base 1.0",
            abilities=(Ability.TEXT_TO_IMAGE,),
            supported_aspect_ratios=_COMMON_RATIOS,
        ),
    )

    def __init__(
        self,
        api_base: str = config.CLOUDFLARE_API_BASE,
        timeout: float = config.HTTP_TIMEOUT,
        connect_timeout: float = config.HTTP_CONNECT_TIMEOUT,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = httpx.Timeout(timeout, connect=connect_timeout)

    def settings_schema(self, capabilities: RuntimeCapabilities) -> List[SettingsField]:
        return list(BUILTIN_SETTINGS if capabilities.offers_builtin else EXTERNAL_SETTINGS)

    def run_url(self, account_id: str, model_id: str) -> str:
        return f"{self.api_base}/accounts/{account_id}/ai/run/{model_id}"

    async def generate_single(
        self,
        request: GenerationRequest,
        settings: CloudflareSettings,
        capabilities: RuntimeCapabilities,
    ) -> List[str]:
        model = find_model(self, request.model_id)
        mode = choose_ability(request, model.abilities)
        params = build_params(request, mode, model)

        if select_transport(capabilities, settings.builtin) is Transport.NATIVE:
            logger.info("cloudflare: running %s through the AI binding", request.model_id)
            resp = await capabilities.ai_binding.run(request.model_id, params.payload())
            return [await normalize_image(resp)]

        logger.info("cloudflare: running %s over REST", request.model_id)
        return [await self._run_rest(request.model_id, params, settings)]

    async def _run_rest(self, model_id: str, params: BackendParams, settings: CloudflareSettings) -> str:
        if not settings.account_id or not settings.api_key:
            raise ConfigurationError("Cloudflare accountId and apiKey are required", self.id)

        headers = {"Authorization": f"Bearer {settings.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(self.run_url(settings.account_id, model_id), json=params.payload(), headers=headers)

        if not r.is_success:
            # bad key, or bad account/model id
            if r.status_code in (401, 404):
                raise ConfigurationError(f"Cloudflare rejected credentials ({r.status_code})", self.id)
            raise BackendError(r.status_code, r.reason_phrase, r.text, provider=self.id)

        media_type = r.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
        if media_type.startswith("image/"):
            return await normalize_image(r.content, media_type)

        data = r.json()
        image = (data.get("result") or {}).get("image") if isinstance(data, dict) else None
        if not isinstance(image, str) or not image:
            raise BackendError(r.status_code, r.reason_phrase, "response has no result.image", provider=self.id)
        return await normalize_image(image)
