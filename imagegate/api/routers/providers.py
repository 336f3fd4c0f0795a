from typing import List

from fastapi import APIRouter, Depends

from imagegate.api.deps import get_capabilities
from imagegate.core.context import RuntimeCapabilities
from imagegate.providers.factory import list_providers
from imagegate.schemas.provider import ProviderInfo

router = APIRouter(tags=["providers"])


@router.get("/providers", response_model=List[ProviderInfo])
def providers(capabilities: RuntimeCapabilities = Depends(get_capabilities)):
    # settings variant shown depends on the deployment, not on the caller
    return [ProviderInfo(**p.info(capabilities)) for p in list_providers()]
