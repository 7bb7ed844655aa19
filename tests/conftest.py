"""Shared fixtures for the stock relay tests."""

import pytest
from fastapi.testclient import TestClient

from main import app
from stock_relay.config import AUTH_KEY
from stock_relay.stock_store import StockStore, get_store

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> int:
        self.now += int(seconds * 1000)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> StockStore:
    return StockStore(clock=clock, max_age_ms=10 * 60 * 1000)


@pytest.fixture
def client(store: StockStore):
    """TestClient bound to an isolated store.

    The client is not entered as a context manager, so the lifespan (and
    with it the sweep scheduler) does not run.
    """
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": AUTH_KEY}
