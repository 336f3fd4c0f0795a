from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Ability(str, Enum):
    TEXT_TO_IMAGE = "t2i"
    IMAGE_TO_IMAGE = "i2i"


class SettingsKind(str, Enum):
    SECRET = "password"
    BOOLEAN = "boolean"
    TEXT = "text"


class SettingsField(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    key: str
    kind: SettingsKind = Field(alias="type")
    required: bool = False
    default: Any = Field(default=None, alias="defaultValue")


class ModelDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    abilities: Tuple[Ability, ...] = Field(min_length=1)
    enabled_by_default: bool = Field(default=True, alias="enabledByDefault")
    supported_aspect_ratios: Optional[Tuple[str, ...]] = Field(default=None, alias="supportedAspectRatios")

    def supports_ratio(self, ratio: Optional[str]) -> bool:
        return bool(ratio) and ratio in (self.supported_aspect_ratios or ())


class ProviderInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    enabled_by_default: bool = Field(alias="enabledByDefault")
    settings: List[SettingsField]
    models: List[ModelDescriptor]
