from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4", "3:2", "2:3"]

# shared ratio -> pixel size lookup, used by every provider's parameter builder
COMMON_ASPECT_RATIO_SIZES: Dict[str, Dict[str, int]] = {
    "1:1": {"width": 1024, "height": 1024},
    "16:9": {"width": 1344, "height": 768},
    "9:16": {"width": 768, "height": 1344},
    "4:3": {"width": 1152, "height": 864},
    "3:4": {"width": 864, "height": 1152},
    "3:2": {"width": 1216, "height": 832},
    "2:3": {"width": 832, "height": 1216},
}

CONFIG_ERROR = "CONFIG_ERROR"


class GenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    prompt: str = Field(min_length=1)
    model_id: str = Field(alias="modelId", min_length=1)
    aspect_ratio: Optional[AspectRatio] = Field(default=None, alias="aspectRatio")
    # data URIs, in the order the caller supplied them
    images: List[str] = Field(default_factory=list)
    n: Optional[int] = Field(default=None, ge=1)

    @property
    def image_count(self) -> int:
        return self.n or 1


class GenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    images: List[str] = Field(default_factory=list)
    error_reason: Optional[Literal["CONFIG_ERROR"]] = Field(default=None, alias="errorReason")


class GenerateBody(BaseModel):
    provider: Optional[str] = None
    request: GenerationRequest
    settings: Dict[str, Any] = Field(default_factory=dict)
