import logging
from typing import Annotated, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from bridge.core import schemas
from bridge.core.config import Settings, get_settings
from bridge.core.errors import GenerationError
from bridge.generation import service

router = APIRouter(prefix="/generation", tags=["Generation"])

settings_dep = Annotated[Settings, Depends(get_settings)]


# Real network by default; tests swap in a mock transport
def get_generation_transport() -> Optional[httpx.AsyncBaseTransport]:
    return None


transport_dep = Annotated[
    Optional[httpx.AsyncBaseTransport], Depends(get_generation_transport)
]


@router.post("", response_model=schemas.GenerationResponse)
async def generate_text(
    payload: schemas.GenerationRequest, settings: settings_dep, transport: transport_dep
):
    """Forward the prompt to the local generation service and return its full answer."""
    try:
        text = await service.generate(
            prompt=payload.prompt,
            model_identifier=settings.GENERATION_MODEL,
            base_url=settings.GENERATION_URL,
            transport=transport,
        )
    except GenerationError as error:
        logging.error(f"Generation failed: {error}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))

    return {"model": settings.GENERATION_MODEL, "response": text}
