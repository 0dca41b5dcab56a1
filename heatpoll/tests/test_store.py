"""Tests for the memory and Redis poll stores."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import WatchError

from heatpoll.db import MemoryPollStore, PollStore, generate_token
from heatpoll.db.base import ID_ATTEMPTS
from heatpoll.errors import ServiceUnavailableError
from heatpoll.models.poll import RatingEntry

SLOTS = ["2024-03-01:9", "2024-03-01:10"]


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return MemoryPollStore()
    return request.getfixturevalue("redis_store")


def test_generate_token():
    token = generate_token(12)
    assert len(token) == 12
    assert token.isalnum() and token.lower() == token


@pytest.mark.asyncio
async def test_create_and_get_event(store):
    event = await store.create_event("Dinner", "", SLOTS, id_length=8, mod_key_length=20)
    assert len(event.id) == 8
    assert len(event.mod_key) == 20
    loaded = await store.get_event(event.id)
    assert loaded == event


@pytest.mark.asyncio
async def test_get_missing_event(store):
    assert await store.get_event("missing") is None


@pytest.mark.asyncio
async def test_votes_append_by_default(store):
    event = await store.create_event("Dinner", "", SLOTS)
    await store.add_vote(event.id, "A", [RatingEntry(slot=SLOTS[0], rating="great")])
    await store.add_vote(event.id, "A", [RatingEntry(slot=SLOTS[1], rating="fine")])
    votes = await store.list_votes(event.id)
    assert [v.voter_name for v in votes] == ["A", "A"]
    assert votes[0].ratings[0].slot == SLOTS[0]
    assert votes[1].ratings[0].slot == SLOTS[1]


@pytest.mark.asyncio
async def test_votes_replace(store):
    event = await store.create_event("Dinner", "", SLOTS)
    await store.add_vote(event.id, "A", [RatingEntry(slot=SLOTS[0], rating="great")])
    await store.add_vote(event.id, "B", [])
    replacement = await store.add_vote(event.id, "A", [RatingEntry(slot=SLOTS[1], rating="good")], replace=True)
    votes = await store.list_votes(event.id)
    assert [v.voter_name for v in votes] == ["B", "A"]
    assert votes[1].id == replacement.id
    assert votes[1].ratings[0].slot == SLOTS[1]


@pytest.mark.asyncio
async def test_list_votes_for_unknown_event(store):
    assert await store.list_votes("missing") == []


@pytest.mark.asyncio
async def test_ping(store):
    assert await store.ping() is True


@pytest.mark.asyncio
async def test_redis_keys_use_prefix(redis_store, fake_redis):
    event = await redis_store.create_event("Dinner", "", SLOTS)
    assert await fake_redis.exists(f"test:event:{event.id}") == 1
    await redis_store.add_vote(event.id, "A", [])
    assert await fake_redis.llen(f"test:votes:{event.id}") == 1


@pytest.mark.asyncio
async def test_redis_create_retries_on_collision(redis_store, fake_redis, monkeypatch):
    import heatpoll.db.redis_store as redis_store_module

    await fake_redis.set("test:event:taken", "{}")
    tokens = iter(["taken", "mod-key-1", "fresh", "mod-key-2"])
    monkeypatch.setattr(redis_store_module, "generate_token", lambda _length=10: next(tokens))
    monkeypatch.setattr("heatpoll.db.base.generate_token", lambda _length=10: next(tokens))
    event = await redis_store.create_event("Dinner", "", SLOTS)
    assert event.id == "fresh"


def test_store_interface_is_abstract():
    with pytest.raises(TypeError):
        PollStore()

    class EventsOnly(PollStore):
        async def create_event(self, name, description, slots, id_length=10, mod_key_length=16):
            return None

        async def get_event(self, event_id):
            return None

    with pytest.raises(TypeError):
        EventsOnly()


@pytest.mark.asyncio
async def test_redis_replace_gives_up_after_repeated_conflicts(redis_store, fake_redis, monkeypatch):
    event = await redis_store.create_event("Dinner", "", SLOTS)
    pipe = MagicMock()
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=False)
    pipe.watch = AsyncMock()
    pipe.lrange = AsyncMock(return_value=[])
    pipe.execute = AsyncMock(side_effect=WatchError("watched key changed"))
    monkeypatch.setattr(fake_redis, "pipeline", MagicMock(return_value=pipe))

    with pytest.raises(ServiceUnavailableError) as exc_info:
        await redis_store.add_vote(event.id, "A", [], replace=True)
    assert exc_info.value.status_code == 503
    assert pipe.execute.await_count == ID_ATTEMPTS
