import logging
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from bridge.core.config import Settings, get_settings
from bridge.core.errors import (
    GatewayError,
    QueryExecutionError,
    RowDecodeError,
    StoreConnectionError,
)
from bridge.core.store.gateway import run_query

router = APIRouter(prefix="/store", tags=["Store"])

settings_dep = Annotated[Settings, Depends(get_settings)]

# How each gateway failure is surfaced to the host
GATEWAY_ERROR_STATUS = {
    StoreConnectionError: status.HTTP_503_SERVICE_UNAVAILABLE,
    QueryExecutionError: status.HTTP_502_BAD_GATEWAY,
    RowDecodeError: status.HTTP_502_BAD_GATEWAY,
}


@router.get("/rows", response_model=List[Dict[str, Any]])
async def read_rows(settings: settings_dep):
    """
    Run the configured statement against the configured store.
    Every row comes back as a plain object keyed by column name, in store order.
    """
    try:
        return await run_query(settings.DATABASE_URL, settings.QUERY_STATEMENT)
    except GatewayError as error:
        logging.error(f"Query gateway failed at {error.stage}: {error}")
        raise HTTPException(
            status_code=GATEWAY_ERROR_STATUS.get(
                type(error), status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
            detail=error.message,
        )
