import logging

from fastapi import APIRouter, HTTPException, status

from bridge.core import codec, schemas
from bridge.core.errors import DecodeError

router = APIRouter(prefix="/codec", tags=["Codec"])


@router.post("/encode", response_model=schemas.CodecResponse)
async def encode_value(payload: schemas.CodecRequest):
    return {"value": codec.encode(payload.value)}


@router.post("/decode", response_model=schemas.CodecResponse)
async def decode_value(payload: schemas.CodecRequest):
    try:
        return {"value": codec.decode(payload.value)}
    except DecodeError as error:
        logging.error(f"Failed to decode value: {error}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
