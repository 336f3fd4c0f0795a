# the provider contract every image backend implements (settings_schema / parse_settings / generate)
# plus the shared pieces they all lean on: errors, settings parsing, ability choice, param building

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from imagegate.core.context import RuntimeCapabilities
from imagegate.schemas.generation import (
    COMMON_ASPECT_RATIO_SIZES,
    CONFIG_ERROR,
    GenerationRequest,
    GenerationResult,
)
from imagegate.schemas.provider import Ability, ModelDescriptor, SettingsField, SettingsKind
from imagegate.services.images import data_uri_to_base64

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    def __init__(self, message: str, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider


class ProviderNotFoundError(ProviderError):
    pass


class ConfigurationError(ProviderError):
    """Bad or missing credentials, or the backend rejected them."""

    reason = CONFIG_ERROR


class SettingsParseError(ConfigurationError):
    def __init__(self, message: str, provider: str = "unknown", key: Optional[str] = None):
        super().__init__(message, provider)
        self.key = key


class UnsupportedOperationError(ProviderError):
    pass


class BackendError(ProviderError):
    def __init__(self, status_code: int, status_text: str, body: str, provider: str = "unknown"):
        super().__init__(f"{provider} API error: {status_code} {status_text} - {body}", provider)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body


# --------- settings ---------

_KIND_TYPES: Dict[SettingsKind, Tuple[type, ...]] = {
    SettingsKind.SECRET: (str,),
    SettingsKind.TEXT: (str,),
    SettingsKind.BOOLEAN: (bool,),
}


def parse_settings(
    raw: Optional[Mapping[str, Any]],
    schema: Sequence[SettingsField],
    provider: str = "unknown",
) -> Dict[str, Any]:
    raw = raw or {}
    resolved: Dict[str, Any] = {}
    for field in schema:
        value = raw.get(field.key)
        if value is None or value == "":
            value = field.default
        if value is None:
            if field.required:
                raise SettingsParseError(f"Missing required setting: {field.key}", provider, field.key)
            resolved[field.key] = None
            continue
        if not isinstance(value, _KIND_TYPES[field.kind]):
            raise SettingsParseError(
                f"Setting {field.key} must be of kind {field.kind.value}", provider, field.key
            )
        resolved[field.key] = value
    return resolved


# --------- capability resolution ---------

def choose_ability(request: GenerationRequest, abilities: Sequence[Ability]) -> Ability:
    if request.images:
        if Ability.IMAGE_TO_IMAGE in abilities:
            return Ability.IMAGE_TO_IMAGE
        raise UnsupportedOperationError(
            f"Model {request.model_id} does not accept reference images"
        )
    if Ability.TEXT_TO_IMAGE in abilities:
        return Ability.TEXT_TO_IMAGE
    raise UnsupportedOperationError(
        f"Model {request.model_id} requires a reference image"
    )


def find_model(provider: "ImageProvider", model_id: str) -> ModelDescriptor:
    for model in provider.models:
        if model.id == model_id:
            return model
    raise UnsupportedOperationError(f"Unknown model: {model_id}", provider.id)


# --------- backend parameters ---------

class TextToImageParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    width: Optional[int] = None
    height: Optional[int] = None

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ImageToImageParams(TextToImageParams):
    # raw base64, no data: prefix
    image_b64: str


BackendParams = Union[TextToImageParams, ImageToImageParams]


def build_params(
    request: GenerationRequest,
    mode: Ability,
    model: ModelDescriptor,
    sizes: Mapping[str, Mapping[str, int]] = COMMON_ASPECT_RATIO_SIZES,
) -> BackendParams:
    size: Mapping[str, int] = {}
    if model.supports_ratio(request.aspect_ratio):
        size = sizes.get(request.aspect_ratio, {})
    if mode is Ability.IMAGE_TO_IMAGE:
        if not request.images:
            raise UnsupportedOperationError(f"Model {model.id} requires a reference image")
        # only the first reference image is consumed
        try:
            image_b64 = data_uri_to_base64(request.images[0])
        except ValueError as e:
            raise UnsupportedOperationError(str(e)) from e
        return ImageToImageParams(prompt=request.prompt, image_b64=image_b64, **size)
    return TextToImageParams(prompt=request.prompt, **size)


# --------- transport ---------

class Transport(str, Enum):
    NATIVE = "native"
    REST = "rest"


def select_transport(capabilities: RuntimeCapabilities, use_builtin: Optional[bool]) -> Transport:
    if capabilities.has_binding and use_builtin is True:
        return Transport.NATIVE
    return Transport.REST


# --------- provider contract ---------

def _first_failure(outcomes: Sequence[Any]) -> Optional[BaseException]:
    # CONFIG_ERROR only when every failure is a configuration failure
    failures = [o for o in outcomes if isinstance(o, BaseException)]
    for failure in failures:
        if not isinstance(failure, ConfigurationError):
            return failure
    return failures[0] if failures else None


class ImageProvider(ABC):
    id: str = ""
    name: str = ""
    enabled_by_default: bool = True
    models: Tuple[ModelDescriptor, ...] = ()
    # typed view of the parsed settings; None keeps the plain dict
    settings_model: Optional[Type[BaseModel]] = None

    @abstractmethod
    def settings_schema(self, capabilities: RuntimeCapabilities) -> List[SettingsField]:
        raise NotImplementedError

    def parse_settings(self, raw: Optional[Mapping[str, Any]], capabilities: RuntimeCapabilities) -> Any:
        resolved = parse_settings(raw, self.settings_schema(capabilities), provider=self.id)
        if self.settings_model is None:
            return resolved
        try:
            return self.settings_model.model_validate(resolved)
        except ValidationError as e:
            raise SettingsParseError(f"Invalid settings: {e}", self.id) from e

    @abstractmethod
    async def generate_single(
        self,
        request: GenerationRequest,
        settings: Any,
        capabilities: RuntimeCapabilities,
    ) -> List[str]:
        """Produce the images for one attempt, already normalized to data URIs."""
        raise NotImplementedError

    async def generate(
        self,
        request: GenerationRequest,
        raw_settings: Optional[Mapping[str, Any]],
        capabilities: RuntimeCapabilities,
    ) -> GenerationResult:
        try:
            settings = self.parse_settings(raw_settings, capabilities)
            count = request.image_count
            logger.info("provider=%s model=%s launching %d generation(s)", self.id, request.model_id, count)

            # every attempt runs to completion; nothing is cancelled on first failure
            outcomes = await asyncio.gather(
                *(self.generate_single(request, settings, capabilities) for _ in range(count)),
                return_exceptions=True,
            )
            failure = _first_failure(outcomes)
            if failure is not None:
                raise failure
        except ConfigurationError as e:
            logger.warning("provider=%s configuration error: %s", self.id, e)
            return GenerationResult(images=[], error_reason=CONFIG_ERROR)

        images = [image for batch in outcomes for image in batch]
        return GenerationResult(images=images)

    def info(self, capabilities: RuntimeCapabilities) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "enabled_by_default": self.enabled_by_default,
            "settings": self.settings_schema(capabilities),
            "models": list(self.models),
        }
