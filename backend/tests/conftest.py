"""Pytest fixtures for backend tests."""
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient

from shippo_slot.logic.catalog import ReelCatalog, default_catalog
from shippo_slot.logic.controller import SpinController
from shippo_slot.logic.presenter import RecordingPresenter
from shippo_slot.logic.rng import ScriptedRNG
from shippo_slot.main import app
from shippo_slot.redis_service import RedisService


# Pool positions of the default catalog
SUBJECT = {"わたし": 0, "あなた": 1, "しっぽ": 2, "せんせい": 3, "ねこ": 4}
OBJECT = {"ごはん": 0, "にほんご": 1, "げーむ": 2, "おんがく": 3, "しゅくだい": 4}
VERB = {"たべる": 0, "べんきょうする": 1, "あそぶ": 2, "きく": 3, "わすれる": 4}


def landing(subject: str, obj: str, verb: str) -> list[int]:
    """Landing indices for reels 0, 1, 2 (stopped in that order)."""
    return [SUBJECT[subject], OBJECT[obj], VERB[verb]]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long simulations)"
    )


class MockRedis:
    """Mock Redis client for testing."""

    def __init__(self):
        self._store: dict[str, str] = {}
        self._last_set_ex: int | None = None
        self.closed = False

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(
        self, key: str, value: str, nx: bool = False, ex: int | None = None
    ) -> bool | None:
        if nx and key in self._store:
            return None
        self._store[key] = value
        self._last_set_ex = ex
        return True

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._store[key] = value
        return True

    async def delete(self, key: str) -> int:
        if key in self._store:
            del self._store[key]
            return 1
        return 0

    async def eval(self, script: str, numkeys: int, *args) -> int:
        """Compare-and-delete, as RELEASE_LOCK_SCRIPT does."""
        key = args[0]
        expected_value = args[1]
        if self._store.get(key) == expected_value:
            del self._store[key]
            return 1
        return 0

    async def aclose(self) -> None:
        self.closed = True

    def clear(self) -> None:
        self._store.clear()
        self._last_set_ex = None


class RecordingTelemetrySink:
    """Telemetry sink that keeps every event."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def get_events(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]


@pytest.fixture
def catalog() -> ReelCatalog:
    return default_catalog()


@pytest.fixture
def recorder() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def make_controller(
    catalog: ReelCatalog, recorder: RecordingPresenter
) -> Callable[[list[int]], SpinController]:
    """Build a controller whose landings follow a script."""

    def _make(indices: list[int]) -> SpinController:
        return SpinController(catalog, presenter=recorder, rng=ScriptedRNG(indices))

    return _make


@pytest.fixture
def mock_redis() -> MockRedis:
    """Create a fresh mock Redis for each test."""
    return MockRedis()


@pytest.fixture
def redis_service_with_mock(mock_redis: MockRedis) -> Generator[RedisService, None, None]:
    """Create RedisService with mock client."""
    service = RedisService()
    service._client = mock_redis
    yield service
    mock_redis.clear()


@pytest.fixture
def client_with_mock_redis(mock_redis: MockRedis) -> Generator[TestClient, None, None]:
    """Create TestClient with mocked Redis."""
    from shippo_slot.redis_service import redis_service

    original_client = redis_service._client
    redis_service._client = mock_redis

    with TestClient(app) as client:
        yield client

    redis_service._client = original_client
    mock_redis.clear()


@pytest.fixture
def scripted_landings(monkeypatch) -> Callable[[list[int]], None]:
    """Make the service RNG replay fixed landing indices."""
    import shippo_slot.main as main_module

    def _script(indices: list[int]) -> None:
        monkeypatch.setattr(main_module, "rng", ScriptedRNG(indices))

    return _script


@pytest.fixture
def recording_telemetry() -> Generator[RecordingTelemetrySink, None, None]:
    """Route service telemetry into a RecordingTelemetrySink."""
    from shippo_slot.telemetry import LoggingTelemetrySink, telemetry_service

    sink = RecordingTelemetrySink()
    telemetry_service.set_sink(sink)
    yield sink
    telemetry_service.set_sink(LoggingTelemetrySink())
