# what the host process can offer a provider, captured once at startup
# passed explicitly into settings_schema()/generate() so providers stay free of global state

from dataclasses import dataclass
from typing import Any, AsyncIterable, Dict, Mapping, Optional, Protocol, Union

from imagegate.core import config

BindingResult = Union[bytes, AsyncIterable[bytes], Mapping[str, Any]]


class AiBinding(Protocol):
    """In-process AI execution handle exposed by the edge runtime."""

    async def run(self, model_id: str, params: Dict[str, Any]) -> BindingResult:
        ...


@dataclass(frozen=True)
class RuntimeCapabilities:
    in_edge_runtime: bool = False
    builtin_enabled: bool = False
    ai_binding: Optional[AiBinding] = None

    @property
    def offers_builtin(self) -> bool:
        # deployment opted into built-in mode and we are actually inside the runtime
        return self.in_edge_runtime and self.builtin_enabled

    @property
    def has_binding(self) -> bool:
        return self.in_edge_runtime and self.ai_binding is not None

    @classmethod
    def from_config(cls, ai_binding: Optional[AiBinding] = None) -> "RuntimeCapabilities":
        return cls(
            in_edge_runtime=config.EDGE_RUNTIME,
            builtin_enabled=config.PROVIDER_CLOUDFLARE_BUILTIN,
            ai_binding=ai_binding,
        )
