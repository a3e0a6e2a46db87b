from fastapi import APIRouter

from bridge.core import schemas

router = APIRouter(prefix="/greet", tags=["Greeting"])


# Smoke check the host can call before wiring anything else
@router.get("/{name}", response_model=schemas.MessageResponse)
async def greet(name: str):
    return {"message": f"Hello, {name}! You've been greeted from the bridge!"}
