from fastapi import APIRouter
from bridge.api.endpoints import codec, generation, greet, store

api_router = APIRouter()

# Combine all sub-routers into one
api_router.include_router(codec.router)
api_router.include_router(store.router)
api_router.include_router(generation.router)
api_router.include_router(greet.router)
