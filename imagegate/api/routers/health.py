from fastapi import APIRouter

from imagegate.providers.factory import list_providers

router = APIRouter(tags=["meta"])


@router.get("/health")
def health():
    # liveness plus the registered provider ids
    return {"status": "ok", "providers": [p.id for p in list_providers()]}
