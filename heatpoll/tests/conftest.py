import os
import sys
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

import pytest
from fastapi.testclient import TestClient
import fakeredis.aioredis as fakeredis

import heatpoll.lifespan as lifespan
import heatpoll.main as main
from heatpoll.config import clear_settings_cache
from heatpoll.db import RedisPollStore


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    clear_settings_cache()
    with TestClient(main.app) as c:
        yield c
    clear_settings_cache()


@pytest.fixture
def redis_client_app(monkeypatch):
    """App client whose store is a RedisPollStore over fakeredis."""
    fake = fakeredis.FakeRedis(decode_responses=True)

    async def fake_init_redis():
        return fake

    monkeypatch.setenv("STORE_BACKEND", "redis")
    monkeypatch.setattr(lifespan, "init_redis", fake_init_redis)
    clear_settings_cache()
    with TestClient(main.app) as c:
        yield c
    clear_settings_cache()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def redis_store(fake_redis):
    return RedisPollStore(fake_redis, key_prefix="test")


@pytest.fixture
def scenario_slots():
    return ["2024-03-01:9", "2024-03-01:10"]
