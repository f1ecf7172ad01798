"""
Root conftest for tests.

Provides:
1. ManualClock: deterministic time source for TTL and rate-limit windows
2. Store fixtures for both backends (in-memory and fakeredis-backed Redis)
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from libs.secrets import InMemorySecretStore, RedisSecretStore, SecretStore


class ManualClock:
    """Clock that only moves when a test calls ``advance``."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self._monotonic = 1_000.0

    def now(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._monotonic

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)
        self._monotonic += seconds


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def fake_redis() -> fakeredis.FakeRedis:
    """Isolated in-process Redis server per test."""
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture()
def memory_store(clock: ManualClock) -> InMemorySecretStore:
    return InMemorySecretStore(clock=clock)


@pytest.fixture()
def redis_store(fake_redis: fakeredis.FakeRedis, clock: ManualClock) -> RedisSecretStore:
    return RedisSecretStore(fake_redis, key_prefix="test:secret:", clock=clock)


@pytest.fixture(params=["memory", "redis"])
def store(
    request: pytest.FixtureRequest,
    clock: ManualClock,
    fake_redis: fakeredis.FakeRedis,
) -> Iterator[SecretStore]:
    """Every backend, so contract tests run against both."""
    if request.param == "memory":
        backend: SecretStore = InMemorySecretStore(clock=clock)
    else:
        backend = RedisSecretStore(fake_redis, key_prefix="test:secret:", clock=clock)
    yield backend
    backend.close()
