import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from imagegate.api.deps import get_capabilities
from imagegate.core.context import RuntimeCapabilities
from imagegate.providers.base import BackendError, ProviderNotFoundError, UnsupportedOperationError
from imagegate.schemas.generation import GenerateBody, GenerationResult
from imagegate.services.generation_service import generate_images

router = APIRouter(tags=["generate"])
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=GenerationResult, response_model_exclude_none=True)
async def generate(body: GenerateBody, capabilities: RuntimeCapabilities = Depends(get_capabilities)):
    try:
        return await generate_images(body.request, body.settings, capabilities, provider_id=body.provider)
    except ProviderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsupportedOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError as e:
        logger.exception("backend error from %s", e.provider)
        raise HTTPException(
            status_code=502,
            detail={"status": e.status_code, "statusText": e.status_text, "body": e.body},
        )
    except httpx.HTTPError as e:
        logger.exception("transport error: %s", e)
        raise HTTPException(status_code=502, detail=f"upstream request failed: {e}")
    except Exception as e:
        # malformed backend payloads and other unexpected failures
        logger.exception("generation failed: %s", e)
        raise HTTPException(status_code=500, detail="image generation failed")
