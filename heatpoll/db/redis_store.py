import logging

import redis.asyncio as redis
from redis.exceptions import WatchError

from heatpoll.db.base import ID_ATTEMPTS, PollStore, generate_token
from heatpoll.errors import ServiceUnavailableError
from heatpoll.models.poll import Event, RatingEntry, Vote

logger = logging.getLogger("heatpoll.store")


class RedisPollStore(PollStore):
    """Events as JSON strings, votes as a JSON list per event.

    Keys:
        <prefix>:event:<id>  -> Event JSON
        <prefix>:votes:<id>  -> list of Vote JSON, in submission order
    """

    name = "redis"

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "heatpoll") -> None:
        self.redis_client = redis_client
        self.key_prefix = key_prefix

    def event_key(self, event_id: str) -> str:
        return f"{self.key_prefix}:event:{event_id}"

    def votes_key(self, event_id: str) -> str:
        return f"{self.key_prefix}:votes:{event_id}"

    async def create_event(
        self,
        name: str,
        description: str,
        slots: list[str],
        id_length: int = 10,
        mod_key_length: int = 16,
    ) -> Event:
        for _ in range(ID_ATTEMPTS):
            event_id = generate_token(id_length)
            event = self._new_event(name, description, slots, event_id, mod_key_length)
            created = await self.redis_client.set(self.event_key(event_id), event.model_dump_json(), nx=True)
            if not created:
                continue
            logger.debug("store.redis create_event id=%s slots=%d", event_id, len(slots))
            return event
        raise RuntimeError("Failed to generate unique event ID")

    async def get_event(self, event_id: str) -> Event | None:
        raw = await self.redis_client.get(self.event_key(event_id))
        if raw is None:
            return None
        return Event.model_validate_json(raw)

    async def add_vote(
        self,
        event_id: str,
        voter_name: str,
        ratings: list[RatingEntry],
        replace: bool = False,
    ) -> Vote:
        vote = self._new_vote(event_id, voter_name, ratings)
        key = self.votes_key(event_id)
        if not replace:
            await self.redis_client.rpush(key, vote.model_dump_json())
            return vote

        async with self.redis_client.pipeline(transaction=True) as pipe:
            for attempt in range(ID_ATTEMPTS):
                try:
                    await pipe.watch(key)
                    existing = await pipe.lrange(key, 0, -1)
                    keep = [raw for raw in existing if Vote.model_validate_json(raw).voter_name != voter_name]
                    pipe.multi()
                    pipe.delete(key)
                    pipe.rpush(key, *keep, vote.model_dump_json())
                    await pipe.execute()
                    break
                except WatchError:
                    logger.debug("store.redis add_vote retry event=%s attempt=%d", event_id, attempt + 1)
            else:
                logger.error("store.redis add_vote gave up event=%s attempts=%d", event_id, ID_ATTEMPTS)
                raise ServiceUnavailableError(detail="Vote store busy, try again", event_id=event_id)
        logger.debug("store.redis replaced votes event=%s voter=%s dropped=%d", event_id, voter_name, len(existing) - len(keep))
        return vote

    async def list_votes(self, event_id: str) -> list[Vote]:
        rows = await self.redis_client.lrange(self.votes_key(event_id), 0, -1)
        return [Vote.model_validate_json(raw) for raw in rows]

    async def ping(self) -> bool:
        try:
            await self.redis_client.ping()
            return True
        except Exception:
            return False

    async def close(self) -> None:
        aclose = getattr(self.redis_client, "aclose", None)
        if callable(aclose):
            await aclose()
