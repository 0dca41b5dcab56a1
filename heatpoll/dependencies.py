"""Dependency injection for FastAPI endpoints.

Usage in controllers:
    from heatpoll.dependencies import Store

    @router.get("/events/{event_id}")
    async def get_event(event_id: str, store: Store):
        return await store.get_event(event_id)
"""

from typing import Annotated

from fastapi import Depends

from heatpoll import state
from heatpoll.config import PollSettings, get_settings
from heatpoll.db import PollStore
from heatpoll.errors import ServiceUnavailableError


def get_store() -> PollStore:
    """Get the poll store.

    Raises:
        ServiceUnavailableError: If no store has been initialized.

    Returns:
        The active PollStore.
    """
    if state.store is None:
        raise ServiceUnavailableError(detail="Store not initialized")
    return state.store


def get_poll_settings() -> PollSettings:
    return get_settings().poll


Store = Annotated[PollStore, Depends(get_store)]
PollConfig = Annotated[PollSettings, Depends(get_poll_settings)]
