"""Pytest fixtures for the service.

Each test gets its own `OrderTracker` injected into the FastAPI app through
`app.dependency_overrides`, so no state leaks between tests. Tests wait on
the tracker's task handles instead of sleeping on wall-clock time.

Two trackers are provided:
- `tracker`: completes orders almost immediately.
- `slow_tracker`: keeps orders Processing for the duration of a test; its
  pending units are interrupted on teardown.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient

from app.api import deps
from app.main import app
from app.services.orders import OrderTracker

FAST_DELAY = 0.05
SLOW_DELAY = 30.0
WAIT_TIMEOUT = 5.0


@pytest.fixture()
def tracker() -> Iterator[OrderTracker]:
    """Tracker whose orders complete after a few milliseconds."""
    t = OrderTracker(processing_delay=FAST_DELAY)
    yield t
    t.shutdown(wait=True)


@pytest.fixture()
def slow_tracker() -> Iterator[OrderTracker]:
    """Tracker whose orders stay Processing until teardown."""
    t = OrderTracker(processing_delay=SLOW_DELAY)
    yield t
    t.shutdown(wait=True)


@pytest.fixture()
def order_id(faker: Faker) -> int:
    """Random order id."""
    return faker.random_int(min=1, max=1_000_000)


async def _client_for(t: OrderTracker) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[deps.get_order_tracker] = lambda: t
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(tracker: OrderTracker) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the fast tracker."""
    async for ac in _client_for(tracker):
        yield ac


@pytest.fixture()
async def slow_client(slow_tracker: OrderTracker) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the slow tracker."""
    async for ac in _client_for(slow_tracker):
        yield ac
