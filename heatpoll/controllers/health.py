from fastapi import APIRouter
from typing import Dict

from heatpoll import state

router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, str]:
    store_status = "disconnected"
    if state.store is not None:
        store_status = "healthy" if await state.store.ping() else "unhealthy"

    return {
        "status": "ok",
        "store": store_status,
        "backend": state.store.name if state.store is not None else "none",
    }
