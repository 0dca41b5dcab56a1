"""Application startup and shutdown.

Builds the configured poll store (and its Redis client when the Redis
backend is selected), publishes it on ``heatpoll.state``, and tears it down
again on shutdown.
"""

import logging
from dataclasses import dataclass

import redis.asyncio as redis
from redis.asyncio import BlockingConnectionPool as RedisConnectionPool

from heatpoll import state
from heatpoll.config import get_settings
from heatpoll.db import MemoryPollStore, PollStore, RedisPollStore

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    redis_client: redis.Redis | None = None
    store: PollStore | None = None


async def init_redis() -> redis.Redis:
    """Initialize Redis connection with connection pool.

    Returns:
        Configured Redis client.
    """
    settings = get_settings()

    redis_pool = RedisConnectionPool(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        password=settings.redis.password if settings.redis.password else None,
        max_connections=settings.redis.max_connections,
        timeout=settings.redis.pool_timeout_sec,
        socket_timeout=settings.redis.socket_timeout,
        socket_connect_timeout=settings.redis.socket_connect_timeout,
        decode_responses=True,
    )
    redis_client = redis.Redis(connection_pool=redis_pool)

    if settings.debug.redis:
        logging.getLogger("heatpoll.store").setLevel(logging.DEBUG)

    return redis_client


async def init_store(resources: LifespanResources) -> PollStore:
    """Create the store selected by ``STORE_BACKEND``."""
    settings = get_settings()
    if settings.store.backend == "redis":
        resources.redis_client = await init_redis()
        store: PollStore = RedisPollStore(resources.redis_client, key_prefix=settings.redis.key_prefix)
    else:
        store = MemoryPollStore()
    logger.info("Poll store initialized backend=%s", store.name)
    return store


async def setup_resources() -> LifespanResources:
    """Set up all shared resources.

    Returns:
        LifespanResources containing all initialized resources.
    """
    resources = LifespanResources()
    resources.store = await init_store(resources)

    state.redis_client = resources.redis_client
    state.store = resources.store

    return resources


async def cleanup_resources(resources: LifespanResources) -> None:
    """Clean up all resources on shutdown.

    Args:
        resources: The resources to clean up.
    """
    if resources.store is not None:
        try:
            await resources.store.close()
        except Exception as e:
            logger.warning("Failed to close store: %s", e)

    state.redis_client = None
    state.store = None
